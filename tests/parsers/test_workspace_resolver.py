"""Workspace resolution and entry detection tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from slngraph.errors import NotFoundError, UnsupportedInputError
from slngraph.parsers import WorkspaceResolver, detect_entry, resolve_entries
from slngraph.utils.path_utils import canonical_identity


def test_solution_entries_resolve_to_projects(write_project, write_solution) -> None:
    """Folder entries are skipped; project entries resolve next to the .sln."""
    app = write_project("src/App/App.csproj")
    core = write_project("src/Core/Core.csproj")
    sln = write_solution(
        [("App", "src\\App\\App.csproj"), ("Core", "src\\Core\\Core.csproj")],
        folders=["Solution Items"],
    )

    resolution = resolve_entries(sln)

    assert resolution.is_workspace
    assert resolution.workspace_path == sln.resolve()
    assert resolution.workspace_identity == canonical_identity(sln)
    assert resolution.project_paths == [app.resolve(), core.resolve()]
    assert [entry.name for entry in resolution.declared] == ["App", "Core", "Solution Items"]


def test_missing_solution_entry_is_skipped(write_project, write_solution) -> None:
    app = write_project("App/App.csproj")
    sln = write_solution([("App", "App\\App.csproj"), ("Gone", "Gone\\Gone.csproj")])

    resolution = resolve_entries(sln)

    assert resolution.project_paths == [app.resolve()]
    assert len(resolution.declared) == 2


def test_duplicate_solution_entries_collapse(write_project, write_solution) -> None:
    write_project("App/App.csproj")
    sln = write_solution([("App", "App\\App.csproj"), ("App2", "./App/App.csproj")])

    assert len(resolve_entries(sln).project_paths) == 1


def test_solution_with_byte_order_mark(write_project, tmp_path: Path) -> None:
    app = write_project("App/App.csproj")
    sln = tmp_path / "Bom.sln"
    sln.write_text(
        '\ufeffProject("{9A19103F-16F7-4668-BE54-9A1E7A4F7556}") = "App", '
        '"App\\App.csproj", "{00000001-0000-0000-0000-000000000000}"\r\nEndProject\r\n',
        encoding="utf-8",
    )

    assert resolve_entries(sln).project_paths == [app.resolve()]


def test_empty_solution_resolves_no_projects(write_solution) -> None:
    sln = write_solution([])

    resolution = resolve_entries(sln)

    assert resolution.is_workspace
    assert resolution.project_paths == []


def test_manifest_input_is_single_entry(write_project) -> None:
    app = write_project("App.csproj")

    resolution = WorkspaceResolver().resolve_entries(app)

    assert not resolution.is_workspace
    assert resolution.project_paths == [app.resolve()]


def test_unsupported_extension(tmp_path: Path) -> None:
    other = tmp_path / "build.proj"
    other.write_text("<Project />", encoding="utf-8")

    with pytest.raises(UnsupportedInputError):
        resolve_entries(other)


def test_missing_input(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError):
        resolve_entries(tmp_path / "Missing.sln")


def test_detect_entry_prefers_solution(write_project, write_solution, tmp_path: Path) -> None:
    write_project("App.csproj")
    sln = write_solution([("App", "App.csproj")])

    assert detect_entry(tmp_path) == sln.resolve()


def test_detect_entry_single_project(write_project, tmp_path: Path) -> None:
    app = write_project("App.csproj")

    assert detect_entry(tmp_path) == app.resolve()


def test_detect_entry_returns_files_unchanged(write_project) -> None:
    app = write_project("nested/App.csproj")

    assert detect_entry(app) == app.resolve()


def test_detect_entry_ambiguous(write_project, tmp_path: Path) -> None:
    write_project("A.csproj")
    write_project("B.csproj")

    with pytest.raises(UnsupportedInputError, match="Multiple project files"):
        detect_entry(tmp_path)


def test_detect_entry_empty_directory(tmp_path: Path) -> None:
    with pytest.raises(UnsupportedInputError, match="No workspace or project file"):
        detect_entry(tmp_path)


def test_detect_entry_missing_path(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError):
        detect_entry(tmp_path / "absent")
