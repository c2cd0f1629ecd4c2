"""Rich tables summarizing a built graph on the console."""

from typing import Iterable

from rich.console import Console
from rich.table import Table

from slngraph.graph import DependencyGraph, ProjectRecord


def project_table(records: Iterable[ProjectRecord], title: str) -> Table:
    """Table of project records sorted by display name."""
    table = Table(title=title, show_lines=False)
    table.add_column("Project", style="bold")
    table.add_column("Kind")
    table.add_column("Frameworks")
    table.add_column("Packages", justify="right")
    table.add_column("Path", overflow="fold")
    for record in sorted(records, key=lambda r: (r.display_name.lower(), r.identity)):
        table.add_row(
            record.display_name,
            record.output_kind.value,
            ", ".join(record.target_frameworks) or "-",
            str(len(record.package_references)),
            record.path,
        )
    return table


def render_graph_summary(graph: DependencyGraph, console: Console) -> None:
    """Print project table, reference counts and diagnostics."""
    table = Table(title="Projects")
    table.add_column("Project", style="bold")
    table.add_column("Kind")
    table.add_column("Frameworks")
    table.add_column("References", justify="right")
    table.add_column("Referenced by", justify="right")
    table.add_column("Packages", justify="right")

    for record in sorted(graph.projects(), key=lambda r: (r.display_name.lower(), r.identity)):
        referenced_by = sum(
            1 for source in graph.predecessors(record.identity)
            if not graph.nodes[source].is_workspace
        )
        name = record.display_name if not record.is_stub else f"{record.display_name} (unparsed)"
        table.add_row(
            name,
            record.output_kind.value,
            ", ".join(record.target_frameworks) or "-",
            str(sum(1 for _ in graph.successors(record.identity))),
            str(referenced_by),
            str(len(record.package_references)),
        )

    console.print(table)
    project_edges = sum(
        1 for source, _ in graph.edges if not graph.nodes[source].is_workspace
    )
    console.print(
        f"{graph.project_count()} project(s), {project_edges} project reference(s)"
    )

    if graph.diagnostics:
        console.print(f"[yellow]{len(graph.diagnostics)} warning(s):[/yellow]")
        for diagnostic in graph.diagnostics:
            console.print(f"  - {diagnostic}", markup=False)
