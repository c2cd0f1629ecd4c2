"""Public graph API surface.

The builder lives in ``slngraph.graph.builder``; it depends on the parsers,
which themselves import the models exported here.
"""

from slngraph.graph.dependency_graph import DependencyGraph, Edge
from slngraph.graph.models import (
    Diagnostic,
    DiagnosticKind,
    OutputKind,
    PackageReference,
    ProjectRecord,
)
from slngraph.graph.query import (
    direct_dependencies,
    direct_dependents,
    find_cycles,
    find_projects,
    induced_subgraph,
    transitive_dependencies,
    transitive_dependents,
)

__all__ = [
    "DependencyGraph",
    "Diagnostic",
    "DiagnosticKind",
    "Edge",
    "OutputKind",
    "PackageReference",
    "ProjectRecord",
    "direct_dependencies",
    "direct_dependents",
    "find_cycles",
    "find_projects",
    "induced_subgraph",
    "transitive_dependencies",
    "transitive_dependents",
]
