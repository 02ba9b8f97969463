"""Helpers for loading configuration from TOML/JSON sources.

This module provides a single entry point `load_config` that accepts
various configuration sources:

* None -> default NativeDepsConfig
* dict -> NativeDepsConfig.from_dict
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from nativedeps.config.schema import NativeDepsConfig
from nativedeps.errors import ConfigurationError

logger = logging.getLogger("nativedeps.config.loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]


def parse_document(text: str, fmt: str) -> Dict[str, Any]:
    """Parse TOML or JSON text into a dict.

    Raises:
        ConfigurationError: If the text cannot be parsed.
    """
    try:
        if fmt == "toml":
            return tomllib.loads(text)
        data = json.loads(text)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Invalid {fmt.upper()} document: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration document must be a mapping")
    return data


def read_document(source: Union[str, Path]) -> Dict[str, Any]:
    """Read a TOML/JSON document from a file path or inline text."""
    path = Path(source)
    try:
        is_file = path.is_file()
    except OSError:
        # Inline text too long to be a path.
        is_file = False

    if is_file:
        text = path.read_text(encoding="utf-8")
        fmt = "json" if path.suffix.lower() == ".json" else "toml"
        logger.debug("Loading %s document from %s", fmt.upper(), path)
        return parse_document(text, fmt)

    text = str(source)
    if path.suffix.lower() in {".toml", ".json"} and not any(c in text for c in "={\n"):
        raise ConfigurationError(f"Configuration file not found: {path}")
    fmt = "json" if text.lstrip().startswith("{") else "toml"
    logger.debug("Parsing inline %s document", fmt.upper())
    return parse_document(text, fmt)


def load_config(source: ConfigSource) -> NativeDepsConfig:
    """Load NativeDepsConfig from various configuration sources.

    Args:
        source: One of:
            * None: returns the default configuration
            * dict: treated as already-parsed configuration mapping
            * str/Path: either a filesystem path to a .toml/.json file,
              or an inline TOML/JSON string (auto-detected)

    Returns:
        NativeDepsConfig instance.

    Raises:
        ConfigurationError: If the source cannot be parsed or validated.
    """
    if source is None:
        logger.debug("No config source provided; using defaults")
        return NativeDepsConfig()

    data = source if isinstance(source, dict) else read_document(source)
    try:
        return NativeDepsConfig.from_dict(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
