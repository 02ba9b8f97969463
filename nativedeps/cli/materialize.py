"""CLI command to materialize a single header artifact."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from nativedeps.cli.common import load_cli_config
from nativedeps.context import create_build_context
from nativedeps.errors import NativeDepsError
from nativedeps.variant.identity import Usage

logger = logging.getLogger("nativedeps.cli.materialize")


def materialize_command(args, console: Console) -> int:
    """Extract a header archive (or pass a directory through).

    Args:
        args: Parsed command-line arguments.
        console: Console used for output.

    Returns:
        int: Exit code (0 for success, 1 for failure).
    """
    try:
        config = load_cli_config(args)
        context = create_build_context(config)
        registration = context.engine.transforms.register(
            Usage.C_PLUS_PLUS_API,
            Usage.C_PLUS_PLUS_API_DIRS,
            context.scope_builder.header_transform,
        )
        artifact = Path(args.artifact).expanduser().resolve()
        outputs = context.engine.transform_cache.apply(registration, artifact)
    except NativeDepsError as exc:
        logger.error("%s", exc)
        console.print(
            f"[red]error:[/red] {escape(str(exc))}", highlight=False, soft_wrap=True
        )
        return 1

    for output in outputs:
        console.print(str(output), highlight=False, soft_wrap=True, markup=False)
    return 0
