"""Workspace entry resolution for solution files and single manifests."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, NamedTuple, Optional

from slngraph.config.schema import BuildConfig
from slngraph.errors import NotFoundError, ParseFailure, UnsupportedInputError
from slngraph.utils.path_utils import (
    PathLike,
    absolute_path,
    canonical_identity,
    resolve_reference,
)

logger = logging.getLogger("slngraph.parsers.workspace")

# Project("{TYPE-GUID}") = "Name", "Relative\Path.csproj", "{PROJECT-GUID}"
_PROJECT_LINE = re.compile(
    r'^\s*Project\(\s*"\{(?P<type_id>[^}]+)\}"\s*\)\s*=\s*'
    r'"(?P<name>[^"]+)"\s*,\s*"(?P<path>[^"]+)"\s*,\s*"\{(?P<project_id>[^}]+)\}"',
    re.MULTILINE,
)


class WorkspaceEntry(NamedTuple):
    """One project declaration line of a workspace descriptor."""

    name: str
    relative_path: str
    type_id: str
    project_id: str


@dataclass
class EntryResolution:
    """Entry points for a graph build.

    Attributes:
        project_paths: Manifest paths to seed the traversal with.
        workspace_path: Workspace descriptor, when the input was one.
        workspace_identity: Canonical identity of ``workspace_path``.
        declared: Every project line of the workspace, including folders
            and entries whose file is missing.
    """

    project_paths: List[Path]
    workspace_path: Optional[Path] = None
    workspace_identity: Optional[str] = None
    declared: List[WorkspaceEntry] = field(default_factory=list)

    @property
    def is_workspace(self) -> bool:
        return self.workspace_path is not None


class WorkspaceResolver:
    """Turn an input path into the list of manifests to traverse from."""

    def __init__(self, config: Optional[BuildConfig] = None) -> None:
        self.config = config or BuildConfig.default()

    def resolve_entries(self, path: PathLike) -> EntryResolution:
        """Resolve entry points for a workspace descriptor or a manifest.

        Args:
            path: Workspace descriptor (``.sln``) or project manifest.

        Returns:
            EntryResolution. A workspace with no matching project entries
            yields an empty ``project_paths`` list, not an error.

        Raises:
            NotFoundError: If the file does not exist.
            UnsupportedInputError: If the extension is not recognized.
            ParseFailure: If the workspace descriptor cannot be read.
        """
        input_path = absolute_path(path)
        if not input_path.is_file():
            raise NotFoundError(f"File not found: {input_path}", input_path)

        if self.config.is_manifest(input_path):
            return EntryResolution(project_paths=[input_path])

        if not self.config.is_workspace(input_path):
            expected = ", ".join(
                self.config.workspace_extensions + self.config.manifest_extensions
            )
            raise UnsupportedInputError(
                f"Unsupported input {input_path.name}: expected one of {expected}",
                input_path,
            )

        declared = self.parse_workspace(input_path)
        project_paths: List[Path] = []
        seen = set()
        for entry in declared:
            if not self.config.is_manifest(entry.relative_path):
                logger.debug("Skipping non-project entry %s (%s)", entry.name, entry.relative_path)
                continue
            project_path = resolve_reference(input_path, entry.relative_path)
            if not project_path.is_file():
                logger.debug("Skipping missing project %s: %s", entry.name, project_path)
                continue
            identity = canonical_identity(project_path)
            if identity in seen:
                continue
            seen.add(identity)
            project_paths.append(project_path)

        logger.info(
            "Workspace %s declares %d entries, %d project(s) resolved",
            input_path.name,
            len(declared),
            len(project_paths),
        )
        return EntryResolution(
            project_paths=project_paths,
            workspace_path=input_path,
            workspace_identity=canonical_identity(input_path),
            declared=declared,
        )

    def parse_workspace(self, path: PathLike) -> List[WorkspaceEntry]:
        """Return every project declaration of a workspace descriptor."""
        workspace_path = absolute_path(path)
        try:
            content = workspace_path.read_text(encoding="utf-8-sig")
        except FileNotFoundError as exc:
            raise NotFoundError(f"Workspace file not found: {workspace_path}", workspace_path) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise ParseFailure(f"Unreadable workspace file: {exc}", workspace_path) from exc

        return [
            WorkspaceEntry(
                name=match.group("name"),
                relative_path=match.group("path"),
                type_id=match.group("type_id"),
                project_id=match.group("project_id"),
            )
            for match in _PROJECT_LINE.finditer(content)
        ]


def resolve_entries(path: PathLike, config: Optional[BuildConfig] = None) -> EntryResolution:
    """Convenience wrapper around ``WorkspaceResolver.resolve_entries``."""
    return WorkspaceResolver(config).resolve_entries(path)


__all__ = [
    "EntryResolution",
    "WorkspaceEntry",
    "WorkspaceResolver",
    "resolve_entries",
]
