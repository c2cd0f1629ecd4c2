"""Shared fixtures writing small .NET workspaces to a temp directory."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence, Tuple

import pytest

SDK_PROJECT_TYPE = "9A19103F-16F7-4668-BE54-9A1E7A4F7556"
FOLDER_TYPE = "2150E333-8FDC-42A3-9474-1A3956D46DE8"


def csproj_text(
    references: Iterable[str] = (),
    packages: Iterable[Tuple[str, Optional[str]]] = (),
    target_framework: Optional[str] = "net8.0",
    output_type: Optional[str] = None,
) -> str:
    """Render an SDK-style project file."""
    props = []
    if target_framework:
        props.append(f"    <TargetFramework>{target_framework}</TargetFramework>")
    if output_type:
        props.append(f"    <OutputType>{output_type}</OutputType>")
    items = [f'    <ProjectReference Include="{ref}" />' for ref in references]
    for name, version in packages:
        if version is None:
            items.append(f'    <PackageReference Include="{name}" />')
        else:
            items.append(f'    <PackageReference Include="{name}" Version="{version}" />')
    return "\n".join(
        [
            '<Project Sdk="Microsoft.NET.Sdk">',
            "  <PropertyGroup>",
            *props,
            "  </PropertyGroup>",
            "  <ItemGroup>",
            *items,
            "  </ItemGroup>",
            "</Project>",
            "",
        ]
    )


def sln_text(entries: Sequence[Tuple[str, str]], folders: Sequence[str] = ()) -> str:
    """Render a solution file declaring ``(name, relative_path)`` entries."""
    lines = [
        "",
        "Microsoft Visual Studio Solution File, Format Version 12.00",
        "# Visual Studio Version 17",
    ]
    for index, (name, rel_path) in enumerate(entries):
        guid = f"{index + 1:08X}-0000-0000-0000-000000000000"
        lines.append(
            f'Project("{{{SDK_PROJECT_TYPE}}}") = "{name}", "{rel_path}", "{{{guid}}}"'
        )
        lines.append("EndProject")
    for index, folder in enumerate(folders):
        guid = f"{index + 1:08X}-1111-0000-0000-000000000000"
        lines.append(
            f'Project("{{{FOLDER_TYPE}}}") = "{folder}", "{folder}", "{{{guid}}}"'
        )
        lines.append("EndProject")
    lines.extend(["Global", "EndGlobal", ""])
    return "\r\n".join(lines)


WriteProject = Callable[..., Path]


@pytest.fixture
def write_project(tmp_path: Path) -> WriteProject:
    """Return a helper writing ``<rel_path>`` under ``tmp_path`` as a csproj."""

    def _write(rel_path: str, *references: str, content: Optional[str] = None, **kwargs) -> Path:
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        text = content if content is not None else csproj_text(references, **kwargs)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_solution(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper writing a solution file under ``tmp_path``."""

    def _write(
        entries: Sequence[Tuple[str, str]],
        name: str = "App.sln",
        folders: Sequence[str] = (),
    ) -> Path:
        path = tmp_path / name
        path.write_text(sln_text(entries, folders), encoding="utf-8")
        return path

    return _write
