"""JSON export for dependency graphs.

The document is the boundary contract consumed by presentation layers:
nodes in traversal order, edges sorted, plus diagnostics and counts.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from slngraph.graph.dependency_graph import DependencyGraph
from slngraph.graph.models import ProjectRecord

logger = logging.getLogger("slngraph.export.json")


def _node_to_dict(record: ProjectRecord) -> Dict[str, Any]:
    return {
        "identity": record.identity,
        "display_name": record.display_name,
        "path": record.path,
        "output_kind": record.output_kind.value,
        "target_frameworks": list(record.target_frameworks),
        "package_references": [
            {"name": pkg.name, "version": pkg.version}
            for pkg in record.package_references
        ],
        "properties": dict(record.properties),
        "parse_error": record.parse_error,
    }


def graph_to_dict(graph: DependencyGraph) -> Dict[str, Any]:
    """Convert a graph into a JSON-serializable mapping."""
    return {
        "entry_identity": graph.entry_identity,
        "nodes": [_node_to_dict(record) for record in graph.nodes.values()],
        "edges": [
            {"source": source, "target": target}
            for source, target in graph.sorted_edges()
        ],
        "diagnostics": [d.model_dump(mode="json") for d in graph.diagnostics],
        "metadata": {
            "node_count": graph.node_count(),
            "edge_count": graph.edge_count(),
            "project_count": graph.project_count(),
        },
    }


def export_json(graph: DependencyGraph, output_path: Path) -> None:
    """Export graph to JSON format.

    Args:
        graph: Graph to export.
        output_path: Output file path; parent directories are created.
    """
    output_path = Path(output_path)
    logger.info("Exporting graph to JSON: %s", output_path)

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(graph_to_dict(graph), f, indent=2, ensure_ascii=False)

    logger.info("JSON export completed: %d nodes, %d edges",
                graph.node_count(), graph.edge_count())
