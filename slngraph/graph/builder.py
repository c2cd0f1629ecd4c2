"""Breadth-first, cycle-safe construction of the project dependency graph.

The builder owns one visited set, one node/edge collection and one
diagnostic list per ``build`` call; nothing is shared between calls, so
builds may run concurrently on separate builder instances.

Traversal:

1. Seed the queue with the entry manifests (plus a workspace pseudo-node
   with a pending edge to every entry, when a workspace is given).
2. Pop a path, compute its identity and skip it when already visited.
3. Read it once, insert the node and inspect its project references:
   self references and references to missing files are dropped with a
   diagnostic; the others become pending edges and unvisited targets are
   enqueued.
4. After the queue drains, pending edges whose endpoints are both nodes
   are added to the graph.

The resulting node and edge sets do not depend on queue discipline or on
the number of read workers; only node insertion order does.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Deque, Iterable, List, Optional, Protocol, Set, Tuple, Union

import networkx as nx

from slngraph.config.schema import BuildConfig
from slngraph.errors import BuildCancelledError, NotFoundError
from slngraph.graph.dependency_graph import DependencyGraph
from slngraph.graph.models import Diagnostic, DiagnosticKind, ProjectRecord
from slngraph.parsers.manifest import ManifestReader
from slngraph.utils.path_utils import (
    PathLike,
    absolute_path,
    canonical_identity,
    display_name,
)

logger = logging.getLogger("slngraph.graph.builder")


class Reader(Protocol):
    """Anything able to turn a manifest path into a ProjectRecord."""

    def read(self, path: PathLike) -> ProjectRecord:
        ...


@dataclass(frozen=True)
class _QueueItem:
    path: Path
    identity: str
    explicit: bool = False
    referrer: Optional[str] = None


@dataclass
class _BuildState:
    """Mutable state of a single build call."""

    graph: nx.DiGraph = field(default_factory=nx.DiGraph)
    visited: Set[str] = field(default_factory=set)
    pending_edges: List[Tuple[str, str]] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    reads: int = 0

    def diagnose(
        self,
        kind: DiagnosticKind,
        path: Union[str, Path],
        message: str,
        source: Optional[str] = None,
    ) -> None:
        logger.warning("%s", message)
        self.diagnostics.append(
            Diagnostic(kind=kind, path=str(path), message=message, source=source)
        )


class GraphBuilder:
    """Build a ``DependencyGraph`` from entry manifests.

    Args:
        config: Build configuration; ``max_workers`` controls concurrent
            reads of each traversal frontier.
        reader: Manifest reader; defaults to ``ManifestReader(config)``.
        cancel_event: Checked between queue iterations. When set, the build
            aborts with ``BuildCancelledError``.
    """

    def __init__(
        self,
        config: Optional[BuildConfig] = None,
        reader: Optional[Reader] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.config = config or BuildConfig.default()
        self.reader: Reader = reader or ManifestReader(self.config)
        self.cancel_event = cancel_event

    def build(
        self,
        entries: Iterable[PathLike],
        workspace_path: Optional[PathLike] = None,
    ) -> DependencyGraph:
        """Run the traversal.

        Args:
            entries: Manifest paths to start from.
            workspace_path: Workspace descriptor the entries came from; adds
                a workspace pseudo-node with an edge to every entry.

        Returns:
            Immutable DependencyGraph with the diagnostics of this build.

        Raises:
            NotFoundError: If an entry manifest does not exist.
            BuildCancelledError: If ``cancel_event`` was set.
        """
        state = _BuildState()
        queue: Deque[_QueueItem] = deque()
        entry_identity: Optional[str] = None

        ws_identity: Optional[str] = None
        if workspace_path is not None:
            ws_path = absolute_path(workspace_path)
            ws_identity = canonical_identity(ws_path)
            state.graph.add_node(
                ws_identity,
                record=ProjectRecord.workspace(
                    identity=ws_identity,
                    display_name=display_name(ws_path),
                    path=str(ws_path),
                ),
            )
            state.visited.add(ws_identity)
            entry_identity = ws_identity

        for entry in entries:
            entry_path = absolute_path(entry)
            if not entry_path.is_file():
                raise NotFoundError(f"Project file not found: {entry_path}", entry_path)
            identity = canonical_identity(entry_path)
            if entry_identity is None:
                entry_identity = identity
            if ws_identity is not None:
                state.pending_edges.append((ws_identity, identity))
            queue.append(_QueueItem(entry_path, identity, explicit=True))

        if self.config.max_workers > 1:
            with ThreadPoolExecutor(
                max_workers=self.config.max_workers,
                thread_name_prefix="slngraph-read",
            ) as executor:
                self._drain(queue, state, executor)
        else:
            self._drain(queue, state, None)

        for source, target in state.pending_edges:
            if source == target:
                continue
            if state.graph.has_node(source) and state.graph.has_node(target):
                state.graph.add_edge(source, target)

        graph = DependencyGraph(state.graph, entry_identity, state.diagnostics)
        logger.info(
            "Graph built: %d nodes, %d edges, %d manifest read(s), %d diagnostic(s)",
            graph.node_count(),
            graph.edge_count(),
            state.reads,
            len(state.diagnostics),
        )
        return graph

    def _drain(
        self,
        queue: Deque[_QueueItem],
        state: _BuildState,
        executor: Optional[ThreadPoolExecutor],
    ) -> None:
        while queue:
            self._check_cancelled()
            if executor is None:
                batch = self._pop_unvisited(queue, state, limit=1)
            else:
                batch = self._pop_unvisited(queue, state, limit=None)
            if not batch:
                continue

            if executor is None:
                outcomes = [self._read(item) for item in batch]
            else:
                futures = [executor.submit(self._read, item) for item in batch]
                outcomes = [future.result() for future in futures]

            # Insertion stays in frontier order whatever the completion order.
            for item, outcome in zip(batch, outcomes):
                state.reads += 1
                if isinstance(outcome, NotFoundError):
                    if item.explicit:
                        raise outcome
                    state.diagnose(
                        DiagnosticKind.MISSING_MANIFEST,
                        item.path,
                        f"Referenced project disappeared before it was read: {item.path}",
                        source=item.referrer,
                    )
                    continue
                self._insert(item, outcome, queue, state)

    @staticmethod
    def _pop_unvisited(
        queue: Deque[_QueueItem], state: _BuildState, limit: Optional[int]
    ) -> List[_QueueItem]:
        batch: List[_QueueItem] = []
        while queue and (limit is None or len(batch) < limit):
            item = queue.popleft()
            if item.identity in state.visited:
                continue
            state.visited.add(item.identity)
            batch.append(item)
        return batch

    def _read(self, item: _QueueItem) -> Union[ProjectRecord, NotFoundError]:
        try:
            return self.reader.read(item.path)
        except NotFoundError as exc:
            return exc

    def _insert(
        self,
        item: _QueueItem,
        record: ProjectRecord,
        queue: Deque[_QueueItem],
        state: _BuildState,
    ) -> None:
        identity = item.identity
        if record.identity != identity:
            logger.debug("Reader identity %s differs from %s", record.identity, identity)
            record = record.model_copy(update={"identity": identity})

        state.graph.add_node(identity, record=record)
        logger.debug("Added node: %s", identity)

        if record.is_stub:
            state.diagnose(
                DiagnosticKind.PARSE_FAILURE,
                record.path,
                f"Could not parse {record.path}: {record.parse_error}",
                source=item.referrer,
            )

        for ref in record.project_references:
            ref_path = absolute_path(ref)
            ref_identity = canonical_identity(ref_path)
            if ref_identity == identity:
                state.diagnose(
                    DiagnosticKind.SELF_REFERENCE,
                    ref_path,
                    f"{record.display_name} references itself; edge ignored",
                    source=identity,
                )
                continue
            if not ref_path.is_file():
                state.diagnose(
                    DiagnosticKind.DANGLING_REFERENCE,
                    ref_path,
                    f"{record.display_name} references missing project {ref_path}",
                    source=identity,
                )
                continue

            state.pending_edges.append((identity, ref_identity))
            if ref_identity not in state.visited:
                queue.append(_QueueItem(ref_path, ref_identity, referrer=identity))

    def _check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise BuildCancelledError("Graph build cancelled")


def build_dependency_graph(
    entries: Iterable[PathLike],
    workspace_path: Optional[PathLike] = None,
    config: Optional[BuildConfig] = None,
) -> DependencyGraph:
    """Convenience wrapper around ``GraphBuilder.build``."""
    return GraphBuilder(config).build(entries, workspace_path)


__all__ = ["GraphBuilder", "Reader", "build_dependency_graph"]
