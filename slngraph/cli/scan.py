"""Scan command implementation."""

import logging
import time
from pathlib import Path

from slngraph.cli.common import (
    COMMAND_ERRORS,
    build_from_args,
    console,
    report_error,
    select_project,
)
from slngraph.cli.summary import render_graph_summary
from slngraph.export.json import export_json
from slngraph.graph import induced_subgraph

logger = logging.getLogger("slngraph.cli.scan")


def scan_command(args) -> int:
    """Execute scan command.

    Args:
        args: Parsed command-line arguments.

    Returns:
        int: Exit code. A workspace without projects is not a failure.
    """
    logger.debug("=== slngraph scan ===")
    logger.debug("Input: %s", args.input)
    output = getattr(args, "output", None)
    root = getattr(args, "root", None)

    start_time = time.time()
    try:
        graph = build_from_args(args)
    except KeyboardInterrupt:
        logger.warning("Scan interrupted by user (Ctrl+C)")
        return 130
    except COMMAND_ERRORS as e:
        report_error(e)
        return 1

    logger.info("Scan completed in %.2fs", time.time() - start_time)

    if graph.is_empty:
        console.print(f"No projects found in {args.input}")
    else:
        if root:
            record = select_project(graph, root)
            if record is None:
                return 1
            graph = induced_subgraph(graph, record.identity)
            logger.info("Scoped graph to %s: %d nodes", record.display_name, graph.node_count())
        render_graph_summary(graph, console)

    if output:
        try:
            export_json(graph, Path(output))
        except OSError as e:
            logger.error("Failed to export graph: %s", e)
            return 1
        console.print(f"Graph written to {output}")

    return 0
