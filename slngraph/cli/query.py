"""Query command: dependencies or dependents of one project."""

import logging

from slngraph.cli.common import (
    COMMAND_ERRORS,
    build_from_args,
    console,
    report_error,
    select_project,
)
from slngraph.cli.summary import project_table
from slngraph.graph import (
    direct_dependencies,
    direct_dependents,
    transitive_dependencies,
    transitive_dependents,
)

logger = logging.getLogger("slngraph.cli.query")


def query_command(args) -> int:
    """Execute query command.

    Args:
        args: Parsed command-line arguments containing:
            - input: Solution, project or directory
            - project: Display name or path of the project to inspect
            - transitive: Follow references transitively
            - dependents: Walk reverse edges

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    try:
        graph = build_from_args(args)
    except KeyboardInterrupt:
        logger.warning("Query interrupted by user (Ctrl+C)")
        return 130
    except COMMAND_ERRORS as e:
        report_error(e)
        return 1

    record = select_project(graph, args.project)
    if record is None:
        return 1

    transitive = getattr(args, "transitive", False)
    dependents = getattr(args, "dependents", False)

    if dependents:
        if transitive:
            records = [graph.nodes[i] for i in transitive_dependents(graph, record.identity)]
        else:
            records = direct_dependents(graph, record.identity)
        label = "Projects referencing"
    else:
        if transitive:
            records = [graph.nodes[i] for i in transitive_dependencies(graph, record.identity)]
        else:
            records = direct_dependencies(graph, record.identity)
        label = "Dependencies of"

    records = [r for r in records if not r.is_workspace]
    scope = "all" if transitive else "direct"
    if not records:
        console.print(f"{label} {record.display_name} ({scope}): none")
        return 0

    console.print(project_table(records, f"{label} {record.display_name} ({scope})"))
    return 0
