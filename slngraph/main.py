"""Main CLI entry point for slngraph.

Provides commands: scan, query, cycles
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from slngraph.cli.cycles import cycles_command
from slngraph.cli.query import query_command
from slngraph.cli.scan import scan_command

logger = logging.getLogger("slngraph.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

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
        format="[%(name)s] %(message)s",
        handlers=[handler],
        force=True,
    )


def _add_input_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "input",
        help="Solution (.sln) or project (.csproj) file, or a directory holding one",
    )
    parser.add_argument(
        "-c",
        "--config",
        help=(
            "Optional build configuration: a TOML/JSON file path or an inline "
            "TOML/JSON string. Built-in defaults are used when omitted."
        ),
    )
    parser.add_argument(
        "-w",
        "--workers",
        type=int,
        help="Threads used to read manifests concurrently (overrides config)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="slngraph",
        description="slngraph - .NET project reference graph explorer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    scan_parser = subparsers.add_parser(
        "scan",
        help="Build the project reference graph and print a summary",
    )
    _add_input_argument(scan_parser)
    scan_parser.add_argument(
        "-o",
        "--output",
        help="Write the graph as JSON to this file",
    )
    scan_parser.add_argument(
        "--root",
        help=(
            "Restrict the graph to the dependency tree of this project "
            "(display name or path)"
        ),
    )

    query_parser = subparsers.add_parser(
        "query",
        help="List the dependencies or dependents of one project",
    )
    _add_input_argument(query_parser)
    query_parser.add_argument(
        "project",
        help="Project display name or path",
    )
    query_parser.add_argument(
        "-t",
        "--transitive",
        action="store_true",
        help="Follow references transitively",
    )
    query_parser.add_argument(
        "-r",
        "--dependents",
        action="store_true",
        help="List projects referencing the project instead of its dependencies",
    )

    cycles_parser = subparsers.add_parser(
        "cycles",
        help="Report circular project references",
    )
    _add_input_argument(cycles_parser)
    cycles_parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help=(
            "Maximum number of cycles to report (default: 20). "
            "Use <=0 for no limit (may be expensive on large graphs)."
        ),
    )
    cycles_parser.add_argument(
        "--fail-on-cycle",
        action="store_true",
        help="Exit with non-zero status when cycles are found (useful for CI)",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command == "scan":
        return scan_command(args)
    elif args.command == "query":
        return query_command(args)
    elif args.command == "cycles":
        return cycles_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
