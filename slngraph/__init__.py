"""slngraph - project reference graphs for .NET solutions."""

from slngraph.api import build_graph
from slngraph.config import BuildConfig, load_build_config
from slngraph.errors import (
    BuildCancelledError,
    NotFoundError,
    ParseFailure,
    SlnGraphError,
    UnsupportedInputError,
)
from slngraph.graph import DependencyGraph, Diagnostic, DiagnosticKind, ProjectRecord
from slngraph.graph.builder import GraphBuilder

__version__ = "0.1.0"

__all__ = [
    "BuildCancelledError",
    "BuildConfig",
    "DependencyGraph",
    "Diagnostic",
    "DiagnosticKind",
    "GraphBuilder",
    "NotFoundError",
    "ParseFailure",
    "ProjectRecord",
    "SlnGraphError",
    "UnsupportedInputError",
    "build_graph",
    "load_build_config",
]
