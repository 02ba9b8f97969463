"""Helpers shared by CLI commands."""

from __future__ import annotations

from pathlib import Path

from nativedeps.config import NativeDepsConfig, load_config


def load_cli_config(args) -> NativeDepsConfig:
    """Load the configuration named by ``--config`` and apply ``--cache-dir``."""
    config = load_config(getattr(args, "config", None))
    cache_dir = getattr(args, "cache_dir", None)
    if cache_dir:
        config = config.model_copy(
            update={"cache_dir": Path(cache_dir).expanduser().resolve()}
        )
    return config
