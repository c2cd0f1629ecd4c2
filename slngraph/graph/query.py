"""Read-only queries over a built DependencyGraph.

Traversals take their visited set as an explicit argument so callers can
share or inspect it; a fresh set is allocated when none is given. Every
identity argument may also be a raw path: keys unknown to the graph are
routed through ``canonical_identity`` before lookup.
"""

from __future__ import annotations

import itertools
import logging
from collections import deque
from typing import Callable, Iterable, List, Optional, Set

import networkx as nx

from slngraph.graph.dependency_graph import DependencyGraph
from slngraph.graph.models import ProjectRecord
from slngraph.utils.path_utils import canonical_identity

logger = logging.getLogger("slngraph.graph.query")


def _key(graph: DependencyGraph, identity: str) -> str:
    if graph.has_node(identity):
        return identity
    return canonical_identity(identity)


def _records(graph: DependencyGraph, identities: Iterable[str]) -> List[ProjectRecord]:
    return [graph.nodes[i] for i in identities if i in graph.nodes]


def _reach(
    start: str,
    neighbours: Callable[[str], Iterable[str]],
    visited: Set[str],
) -> Set[str]:
    """Breadth-first reachability guarded by ``visited``.

    Only identities first reached by this call are returned; entries the
    caller already put in ``visited`` are treated as explored.
    """
    reached: Set[str] = set()
    visited.add(start)
    queue = deque(neighbours(start))
    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited.add(current)
        reached.add(current)
        for nxt in neighbours(current):
            if nxt not in visited:
                queue.append(nxt)
    return reached


def direct_dependencies(graph: DependencyGraph, identity: str) -> List[ProjectRecord]:
    """Records ``identity`` references directly; empty when it is absent."""
    return _records(graph, graph.successors(_key(graph, identity)))


def direct_dependents(graph: DependencyGraph, identity: str) -> List[ProjectRecord]:
    """Records that reference ``identity`` directly ("referenced by")."""
    return _records(graph, graph.predecessors(_key(graph, identity)))


def transitive_dependencies(
    graph: DependencyGraph, identity: str, visited: Optional[Set[str]] = None
) -> Set[str]:
    """All identities reachable through outgoing edges, excluding the start.

    Args:
        graph: Graph to query.
        identity: Start node.
        visited: Visited set to use; a fresh set when omitted. It is
            updated in place; identities already in it count as explored.

    Returns:
        Identities first reached by this call; empty when ``identity``
        is absent.
    """
    key = _key(graph, identity)
    if not graph.has_node(key):
        return set()
    return _reach(key, graph.successors, visited if visited is not None else set())


def transitive_dependents(
    graph: DependencyGraph, identity: str, visited: Optional[Set[str]] = None
) -> Set[str]:
    """All identities with a directed path to ``identity``, excluding it."""
    key = _key(graph, identity)
    if not graph.has_node(key):
        return set()
    return _reach(key, graph.predecessors, visited if visited is not None else set())


def induced_subgraph(graph: DependencyGraph, root_identity: str) -> DependencyGraph:
    """Return the forward-closed subgraph reachable from ``root_identity``.

    The root becomes the entry identity of the new graph. Diagnostics raised
    by manifests inside the subgraph are carried over. An absent root gives
    an empty graph.
    """
    root = _key(graph, root_identity)
    if not graph.has_node(root):
        logger.debug("Root %s not in graph; returning empty subgraph", root_identity)
        return DependencyGraph.empty()

    members = transitive_dependencies(graph, root) | {root}
    # Keep the parent graph's insertion order.
    ordered = [identity for identity in graph.nodes if identity in members]
    sub = nx.DiGraph()
    for identity in ordered:
        sub.add_node(identity, record=graph.nodes[identity])
    sub.add_edges_from(
        (source, target)
        for source, target in graph.sorted_edges()
        if source in members and target in members
    )
    diagnostics = [
        d
        for d in graph.diagnostics
        if d.source in members or canonical_identity(d.path) in members
    ]
    return DependencyGraph(sub, root, diagnostics)


def find_cycles(graph: DependencyGraph, limit: Optional[int] = None) -> List[List[str]]:
    """Return elementary reference cycles, each as a list of identities.

    Args:
        graph: Graph to inspect.
        limit: Maximum number of cycles; ``None`` or <= 0 for all (may be
            expensive on large graphs).
    """
    cycles = nx.simple_cycles(graph.native_graph)
    if limit is not None and limit > 0:
        cycles = itertools.islice(cycles, limit)
    return [list(cycle) for cycle in cycles]


def find_projects(graph: DependencyGraph, query: str) -> List[ProjectRecord]:
    """Look up records by identity, path or case-insensitive display name.

    Display names are not unique across a workspace, so several records may
    match.
    """
    key = _key(graph, query)
    if graph.has_node(key):
        return [graph.nodes[key]]
    wanted = query.strip().lower()
    return [
        record
        for record in graph.nodes.values()
        if record.display_name.lower() == wanted
    ]


__all__ = [
    "direct_dependencies",
    "direct_dependents",
    "find_cycles",
    "find_projects",
    "induced_subgraph",
    "transitive_dependencies",
    "transitive_dependents",
]
