"""Helpers shared by the CLI commands."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from pydantic import ValidationError
from rich.console import Console

from slngraph.api import build_graph
from slngraph.config import BuildConfig, load_build_config
from slngraph.errors import SlnGraphError
from slngraph.graph import DependencyGraph, ProjectRecord, find_projects

logger = logging.getLogger("slngraph.cli.common")

console = Console()

# Failures reported as a single message at the command boundary.
COMMAND_ERRORS = (SlnGraphError, ValidationError, OSError, ValueError)


def load_config(args) -> BuildConfig:
    """Load configuration from ``--config`` and apply ``--workers``."""
    config = load_build_config(getattr(args, "config", None))
    workers = getattr(args, "workers", None)
    if workers is not None:
        config = BuildConfig.model_validate({**config.model_dump(), "max_workers": workers})
    return config


def build_from_args(
    args, cancel_event: Optional[threading.Event] = None
) -> DependencyGraph:
    """Build the graph for ``args.input``."""
    config = load_config(args)
    logger.debug("Building graph for %s (workers=%d)", args.input, config.max_workers)
    return build_graph(args.input, config, cancel_event=cancel_event)


def report_error(exc: BaseException) -> None:
    """Log a fatal command error with the offending path when known."""
    path = getattr(exc, "path", None)
    if path:
        logger.error("%s (path: %s)", exc, path)
    else:
        logger.error("%s", exc)


def select_project(graph: DependencyGraph, query: str) -> Optional[ProjectRecord]:
    """Resolve a user-supplied project name or path to a single record.

    Logs an error and returns None when nothing or several projects match.
    """
    matches = [record for record in find_projects(graph, query) if not record.is_workspace]
    if not matches:
        logger.error("Project not found in graph: %s", query)
        return None
    if len(matches) > 1:
        logger.error(
            "Project name %s is ambiguous; use one of: %s",
            query,
            ", ".join(record.path for record in matches),
        )
        return None
    return matches[0]
