"""Library-facing helper running the whole pipeline in one call.

The CLI goes through ``build_graph`` as well; library users who need
custom readers or several builds over the same entries can use
``WorkspaceResolver`` and ``GraphBuilder`` directly.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from slngraph.config.schema import BuildConfig
from slngraph.graph.builder import GraphBuilder, Reader
from slngraph.graph.dependency_graph import DependencyGraph
from slngraph.parsers.detector import detect_entry
from slngraph.parsers.workspace import WorkspaceResolver
from slngraph.utils.path_utils import PathLike

logger = logging.getLogger("slngraph.api")


def build_graph(
    path: PathLike,
    config: Optional[BuildConfig] = None,
    *,
    reader: Optional[Reader] = None,
    cancel_event: Optional[threading.Event] = None,
) -> DependencyGraph:
    """Build the dependency graph for a solution, project or directory.

    Args:
        path: Workspace descriptor, project manifest, or a directory
            holding exactly one of them.
        config: Optional BuildConfig; defaults to ``BuildConfig.default()``.
        reader: Optional manifest reader replacing ``ManifestReader``.
        cancel_event: Optional event checked between traversal steps.

    Returns:
        Immutable DependencyGraph. ``graph.is_empty`` is True when a
        workspace declared no usable project.

    Raises:
        NotFoundError: If the input does not exist.
        UnsupportedInputError: If the input type is not recognized.
        ParseFailure: If a workspace descriptor cannot be read.
        BuildCancelledError: If ``cancel_event`` is set during the build.
    """
    cfg = config or BuildConfig.default()
    entry = detect_entry(path, cfg)
    resolution = WorkspaceResolver(cfg).resolve_entries(entry)
    if resolution.is_workspace and not resolution.project_paths:
        logger.warning("No projects found in %s", resolution.workspace_path)

    builder = GraphBuilder(cfg, reader=reader, cancel_event=cancel_event)
    return builder.build(resolution.project_paths, resolution.workspace_path)


__all__ = ["build_graph"]
