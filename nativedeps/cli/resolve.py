"""CLI command to resolve the dependency file sets of manifest binaries.

Each binary's include path, link libraries and runtime libraries are
resolved (in parallel across binaries) and printed as a table.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nativedeps.binary.cpp_binary import CppBinary
from nativedeps.cli.common import load_cli_config
from nativedeps.cli.manifest import load_binaries, parse_manifest
from nativedeps.config import read_document
from nativedeps.context import create_build_context
from nativedeps.errors import NativeDepsError

logger = logging.getLogger("nativedeps.cli.resolve")


def resolve_binary(binary: CppBinary) -> Dict[str, List[Path]]:
    """Resolve the three file sets of one binary."""
    return {
        "include": binary.compile_include_path.get_files(),
        "link": binary.link_libraries.get_files(),
        "runtime": binary.runtime_libraries.get_files(),
    }


def resolve_command(args, console: Console) -> int:
    """Execute the include-path command.

    Args:
        args: Parsed command-line arguments.
        console: Console used for output.

    Returns:
        int: Exit code (0 for success, 1 for failure).
    """
    try:
        config = load_cli_config(args)
        context = create_build_context(config)
        manifest_path = Path(args.manifest).expanduser().resolve()
        manifest = parse_manifest(read_document(manifest_path))
        binaries = load_binaries(manifest, context, manifest_path.parent)

        with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
            results = list(pool.map(resolve_binary, binaries))
    except NativeDepsError as exc:
        logger.error("%s", exc)
        console.print(
            f"[red]error:[/red] {escape(str(exc))}", highlight=False, soft_wrap=True
        )
        return 1

    for binary, files in zip(binaries, results):
        table = Table(title=f"{binary.name} ({binary.target_machine})")
        table.add_column("Scope")
        table.add_column("Files")
        for scope, paths in files.items():
            table.add_row(scope, "\n".join(str(p) for p in paths) or "-")
        console.print(table)
    return 0
