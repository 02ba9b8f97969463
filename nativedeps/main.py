"""Main CLI entry point for nativedeps.

Provides commands: materialize, include-path
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from nativedeps.cli.materialize import materialize_command
from nativedeps.cli.resolve import resolve_command

logger = logging.getLogger("nativedeps.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    level = logging.DEBUG if verbose else logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] [%(levelname)s] %(message)s",
        handlers=[handler],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nativedeps",
        description="Resolve and materialize native binary dependencies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--config",
        help="Configuration file (TOML or JSON)",
    )
    parser.add_argument(
        "--cache-dir",
        help="Cache directory (overrides the configuration)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    materialize_parser = subparsers.add_parser(
        "materialize",
        help="Extract a header archive into the transform cache",
    )
    materialize_parser.add_argument(
        "artifact",
        help="Header archive (ZIP) or header directory",
    )

    resolve_parser = subparsers.add_parser(
        "include-path",
        help="Resolve include path, link and runtime libraries of manifest binaries",
    )
    resolve_parser.add_argument(
        "manifest",
        help="Build manifest (TOML or JSON)",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console()
    setup_logging(args.verbose, console=Console(stderr=True))

    if args.command == "materialize":
        return materialize_command(args, console)
    if args.command == "include-path":
        return resolve_command(args, console)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
