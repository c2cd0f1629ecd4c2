"""CLI command to report circular project references.

Circular references build fine for the graph but usually break the real
build, so the command can also fail the process for CI pipelines.
"""

from __future__ import annotations

import logging
from typing import List

from slngraph.cli.common import COMMAND_ERRORS, build_from_args, console, report_error
from slngraph.graph import find_cycles

logger = logging.getLogger("slngraph.cli.cycles")


def cycles_command(args) -> int:
    """Execute cycle inspection command.

    Args:
        args: Parsed command-line arguments.

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    try:
        graph = build_from_args(args)
    except KeyboardInterrupt:
        logger.warning("Cycle check interrupted by user (Ctrl+C)")
        return 130
    except COMMAND_ERRORS as e:
        report_error(e)
        return 1

    limit_arg = getattr(args, "limit", None)
    fail_on_cycle = getattr(args, "fail_on_cycle", False)

    limit: int | None = limit_arg if isinstance(limit_arg, int) and limit_arg > 0 else None

    cycles: List[List[str]] = find_cycles(graph, limit=limit)
    if not cycles:
        console.print("No circular project references")
        return 0

    console.print(f"Detected {len(cycles)} cycle(s)")
    for idx, cycle in enumerate(cycles, start=1):
        names = [graph.nodes[identity].display_name for identity in cycle]
        pretty_cycle = names + names[:1]
        console.print(f"Cycle {idx}: {' -> '.join(pretty_cycle)}", markup=False)
        for identity in cycle:
            console.print(f"    - {graph.nodes[identity].path}", markup=False)

    if fail_on_cycle:
        logger.error("Validation failed: circular project references detected")
        return 1

    return 0
