"""Readers for workspace descriptors and project manifests."""

from slngraph.parsers.detector import detect_entry
from slngraph.parsers.manifest import ManifestReader, read_manifest
from slngraph.parsers.workspace import (
    EntryResolution,
    WorkspaceEntry,
    WorkspaceResolver,
    resolve_entries,
)

__all__ = [
    "EntryResolution",
    "ManifestReader",
    "WorkspaceEntry",
    "WorkspaceResolver",
    "detect_entry",
    "read_manifest",
    "resolve_entries",
]
