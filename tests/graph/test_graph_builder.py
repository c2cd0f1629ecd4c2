"""GraphBuilder traversal tests."""

from __future__ import annotations

import threading
from collections import Counter
from pathlib import Path

import networkx as nx
import pytest

from slngraph.config import BuildConfig
from slngraph.errors import BuildCancelledError, NotFoundError
from slngraph.graph import DiagnosticKind, OutputKind, transitive_dependencies
from slngraph.graph.builder import GraphBuilder, build_dependency_graph
from slngraph.parsers.manifest import ManifestReader
from slngraph.utils.path_utils import canonical_identity


class CountingReader:
    """Manifest reader recording how often each identity is read."""

    def __init__(self, fail_on: tuple[str, ...] = ()) -> None:
        self.inner = ManifestReader()
        self.reads: Counter[str] = Counter()
        self.fail_on = fail_on
        self._lock = threading.Lock()

    def read(self, path):
        identity = canonical_identity(path)
        with self._lock:
            self.reads[identity] += 1
        if identity in self.fail_on:
            raise NotFoundError(f"Project file not found: {path}", path)
        return self.inner.read(path)


def _ids(*paths: Path) -> set[str]:
    return {canonical_identity(p) for p in paths}


def test_mutual_references_terminate(write_project) -> None:
    """A <-> B builds two nodes and both edges."""
    a = write_project("A/A.csproj", "../B/B.csproj")
    b = write_project("B/B.csproj", "../A/A.csproj")

    graph = build_dependency_graph([a])

    id_a, id_b = canonical_identity(a), canonical_identity(b)
    assert set(graph.nodes) == {id_a, id_b}
    assert graph.edges == {(id_a, id_b), (id_b, id_a)}
    assert graph.entry_identity == id_a
    assert transitive_dependencies(graph, id_a) == {id_b}
    assert graph.diagnostics == ()


def test_dangling_reference_is_diagnosed(write_project) -> None:
    a = write_project("A/A.csproj", "../Missing/Missing.csproj")

    graph = build_dependency_graph([a])

    assert set(graph.nodes) == _ids(a)
    assert graph.edge_count() == 0
    assert len(graph.diagnostics) == 1
    diagnostic = graph.diagnostics[0]
    assert diagnostic.kind is DiagnosticKind.DANGLING_REFERENCE
    assert "Missing.csproj" in diagnostic.message
    assert diagnostic.source == canonical_identity(a)


def test_each_manifest_read_once(write_project) -> None:
    """Diamond plus back edge: every file is parsed exactly once."""
    a = write_project("A/A.csproj", "../B/B.csproj", "../C/C.csproj")
    write_project("B/B.csproj", "../D/D.csproj")
    write_project("C/C.csproj", "../D/D.csproj", "../B/B.csproj")
    write_project("D/D.csproj", "../A/A.csproj")
    reader = CountingReader()

    graph = GraphBuilder(reader=reader).build([a])

    assert graph.node_count() == 4
    assert graph.edge_count() == 6
    assert set(reader.reads) == set(graph.nodes)
    assert all(count == 1 for count in reader.reads.values())


def test_repeated_builds_are_identical(write_project) -> None:
    a = write_project("A/A.csproj", "../B/B.csproj", "../C/C.csproj")
    write_project("B/B.csproj", "../C/C.csproj")
    write_project("C/C.csproj")

    first = build_dependency_graph([a])
    second = build_dependency_graph([a])

    assert list(first.nodes) == list(second.nodes)
    assert first.sorted_edges() == second.sorted_edges()


@pytest.mark.parametrize("workers", [2, 4])
def test_concurrent_reads_match_sequential(write_project, workers: int) -> None:
    a = write_project("A/A.csproj", "../B/B.csproj", "../C/C.csproj", "../D/D.csproj")
    write_project("B/B.csproj", "../E/E.csproj")
    write_project("C/C.csproj", "../E/E.csproj", "../A/A.csproj")
    write_project("D/D.csproj", "../Missing/Missing.csproj")
    write_project("E/E.csproj")
    reader = CountingReader()

    sequential = build_dependency_graph([a])
    concurrent = GraphBuilder(BuildConfig(max_workers=workers), reader=reader).build([a])

    assert set(concurrent.nodes) == set(sequential.nodes)
    assert concurrent.edges == sequential.edges
    assert len(concurrent.diagnostics) == len(sequential.diagnostics)
    assert all(count == 1 for count in reader.reads.values())


def test_workspace_graph(write_project, write_solution) -> None:
    app = write_project("src/App/App.csproj", "../Core/Core.csproj", output_type="Exe")
    core = write_project("src/Core/Core.csproj")
    sln = write_solution([("App", "src\\App\\App.csproj"), ("Core", "src\\Core\\Core.csproj")])

    graph = GraphBuilder().build([app, core], workspace_path=sln)

    ws, id_app, id_core = canonical_identity(sln), canonical_identity(app), canonical_identity(core)
    assert graph.entry_identity == ws
    assert graph.workspace_identity == ws
    assert graph.nodes[ws].output_kind is OutputKind.WORKSPACE
    assert graph.nodes[ws].display_name == "App"
    assert graph.edges == {(ws, id_app), (ws, id_core), (id_app, id_core)}
    assert graph.project_count() == 2
    assert not graph.is_empty


def test_workspace_without_projects_is_empty(write_solution) -> None:
    sln = write_solution([])

    graph = GraphBuilder().build([], workspace_path=sln)

    assert graph.is_empty
    assert graph.node_count() == 1
    assert graph.edge_count() == 0


def test_spellings_collapse_to_one_node(write_project) -> None:
    a = write_project("A/A.csproj", "../Core/./Core.csproj")
    b = write_project("B/B.csproj", "..\\Core\\Core.csproj")
    core = write_project("Core/Core.csproj")
    host = write_project("Host/Host.csproj", "../A/A.csproj", "../B/B.csproj")

    graph = build_dependency_graph([host])

    id_core = canonical_identity(core)
    assert graph.node_count() == 4
    assert set(graph.predecessors(id_core)) == _ids(a, b)


def test_self_reference_is_dropped(write_project) -> None:
    a = write_project("A/A.csproj", "A.csproj")

    graph = build_dependency_graph([a])

    assert graph.node_count() == 1
    assert graph.edge_count() == 0
    assert [d.kind for d in graph.diagnostics] == [DiagnosticKind.SELF_REFERENCE]


def test_malformed_dependency_becomes_stub(write_project) -> None:
    a = write_project("A/A.csproj", "../Broken/Broken.csproj")
    broken = write_project("Broken/Broken.csproj", content="<Project>")

    graph = build_dependency_graph([a])

    id_a, id_broken = canonical_identity(a), canonical_identity(broken)
    assert graph.nodes[id_broken].is_stub
    assert graph.has_edge(id_a, id_broken)
    assert [d.kind for d in graph.diagnostics] == [DiagnosticKind.PARSE_FAILURE]
    assert graph.diagnostics[0].source == id_a


def test_malformed_entry_does_not_abort(write_project) -> None:
    broken = write_project("Broken.csproj", content="not xml at all")

    graph = build_dependency_graph([broken])

    assert graph.node_count() == 1
    assert graph.nodes[canonical_identity(broken)].is_stub
    assert graph.diagnostics[0].kind is DiagnosticKind.PARSE_FAILURE


def test_manifest_vanishing_mid_build(write_project) -> None:
    a = write_project("A/A.csproj", "../B/B.csproj")
    b = write_project("B/B.csproj")
    reader = CountingReader(fail_on=(canonical_identity(b),))

    graph = GraphBuilder(reader=reader).build([a])

    assert set(graph.nodes) == _ids(a)
    assert graph.edge_count() == 0
    assert [d.kind for d in graph.diagnostics] == [DiagnosticKind.MISSING_MANIFEST]


def test_missing_entry_raises(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError):
        build_dependency_graph([tmp_path / "Nope.csproj"])


def test_cancelled_build(write_project) -> None:
    a = write_project("A/A.csproj")
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(BuildCancelledError):
        GraphBuilder(cancel_event=cancel).build([a])


def test_graph_is_read_only(write_project) -> None:
    a = write_project("A/A.csproj")

    graph = build_dependency_graph([a])

    with pytest.raises(nx.NetworkXError):
        graph.native_graph.add_node("intruder")
    with pytest.raises(TypeError):
        graph.nodes["intruder"] = graph.nodes[canonical_identity(a)]  # type: ignore[index]
