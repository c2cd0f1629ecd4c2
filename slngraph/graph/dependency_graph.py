"""Immutable project dependency graph.

Wraps a frozen NetworkX ``DiGraph`` whose nodes carry a ``record``
attribute (``ProjectRecord``) and whose edges point from a project to the
project it references.
"""

from types import MappingProxyType
from typing import FrozenSet, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import networkx as nx

from slngraph.graph.models import Diagnostic, ProjectRecord

Edge = Tuple[str, str]


class DependencyGraph:
    """Read-only view over the projects and references of one build.

    Instances are produced by ``GraphBuilder`` (or ``induced_subgraph``) and
    never change afterwards; the underlying NetworkX graph is frozen so any
    attempt to mutate it raises ``NetworkXError``.
    """

    def __init__(
        self,
        graph: nx.DiGraph,
        entry_identity: Optional[str] = None,
        diagnostics: Sequence[Diagnostic] = (),
    ) -> None:
        """Freeze ``graph`` and wrap it.

        Args:
            graph: Directed graph keyed by identity; every node must carry a
                ``record`` attribute.
            entry_identity: Identity the traversal started from.
            diagnostics: Non-fatal problems collected during construction.

        Raises:
            ValueError: If a node lacks its record, an edge is a self loop,
                or the entry identity is not a node.
        """
        for node_id, record in graph.nodes(data="record"):
            if not isinstance(record, ProjectRecord):
                raise ValueError(f"Node {node_id} has no ProjectRecord")
        if nx.number_of_selfloops(graph):
            raise ValueError("Self-referencing edges are not allowed")
        if entry_identity is not None and not graph.has_node(entry_identity):
            raise ValueError(f"Entry identity {entry_identity} is not a node")

        self._graph = nx.freeze(graph)
        self._entry_identity = entry_identity
        self._diagnostics = tuple(diagnostics)
        self._nodes = MappingProxyType(
            {node_id: record for node_id, record in graph.nodes(data="record")}
        )
        self._edges = frozenset(graph.edges())

    @classmethod
    def empty(cls) -> "DependencyGraph":
        """Return a graph with no nodes."""
        return cls(nx.DiGraph())

    @property
    def native_graph(self) -> nx.DiGraph:
        """Frozen NetworkX graph for advanced read-only operations."""
        return self._graph

    @property
    def entry_identity(self) -> Optional[str]:
        return self._entry_identity

    @property
    def diagnostics(self) -> Tuple[Diagnostic, ...]:
        return self._diagnostics

    @property
    def nodes(self) -> Mapping[str, ProjectRecord]:
        """Identity -> record, in insertion order."""
        return self._nodes

    @property
    def edges(self) -> FrozenSet[Edge]:
        """(source, target) pairs; source depends on target."""
        return self._edges

    @property
    def workspace_identity(self) -> Optional[str]:
        """Identity of the workspace pseudo-node, if the build had one."""
        for identity, record in self._nodes.items():
            if record.is_workspace:
                return identity
        return None

    def sorted_edges(self) -> List[Edge]:
        """Edges in a stable order for serialization and display."""
        return sorted(self._edges)

    def projects(self) -> Iterator[ProjectRecord]:
        """Iterate project records, skipping the workspace pseudo-node."""
        return (record for record in self._nodes.values() if not record.is_workspace)

    def get(self, identity: str) -> Optional[ProjectRecord]:
        return self._nodes.get(identity)

    def has_node(self, identity: str) -> bool:
        return identity in self._nodes

    def has_edge(self, source: str, target: str) -> bool:
        return (source, target) in self._edges

    def successors(self, identity: str) -> Iterable[str]:
        """Identities ``identity`` depends on directly."""
        if identity not in self._nodes:
            return ()
        return self._graph.successors(identity)

    def predecessors(self, identity: str) -> Iterable[str]:
        """Identities that depend on ``identity`` directly."""
        if identity not in self._nodes:
            return ()
        return self._graph.predecessors(identity)

    def node_count(self) -> int:
        return len(self._nodes)

    def edge_count(self) -> int:
        return len(self._edges)

    def project_count(self) -> int:
        return sum(1 for _ in self.projects())

    @property
    def is_empty(self) -> bool:
        """True when no project was found (a workspace node alone is empty)."""
        return self.project_count() == 0

    def __contains__(self, identity: object) -> bool:
        return identity in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return (
            f"DependencyGraph(nodes={self.node_count()}, edges={self.edge_count()}, "
            f"entry={self._entry_identity!r})"
        )
