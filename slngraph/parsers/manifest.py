"""Project manifest reader turning one .csproj file into a ProjectRecord."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from slngraph.config.schema import BuildConfig
from slngraph.errors import NotFoundError, ParseFailure
from slngraph.graph.models import OutputKind, PackageReference, ProjectRecord
from slngraph.utils.path_utils import (
    PathLike,
    absolute_path,
    canonical_identity,
    display_name,
    resolve_reference,
)

logger = logging.getLogger("slngraph.parsers.manifest")

_EXECUTABLE_OUTPUT_TYPES = {"exe", "winexe"}

# Properties with a structured home on ProjectRecord.
_STRUCTURED_PROPERTIES = {"TargetFramework", "TargetFrameworks", "OutputType"}


class ManifestReader:
    """Parse project manifests into ``ProjectRecord`` values.

    The reader performs no recursion; it is a pure transform of one file.
    """

    NAME = "manifest"

    def __init__(self, config: Optional[BuildConfig] = None) -> None:
        self.config = config or BuildConfig.default()

    def read(self, path: PathLike) -> ProjectRecord:
        """Read a project manifest.

        Args:
            path: Absolute or relative path of the manifest.

        Returns:
            ProjectRecord. Malformed manifests yield a stub record with
            ``parse_error`` set and empty reference lists.

        Raises:
            NotFoundError: If the file does not exist.
        """
        manifest_path = absolute_path(path)
        if not manifest_path.is_file():
            raise NotFoundError(f"Project file not found: {manifest_path}", manifest_path)

        identity = canonical_identity(manifest_path)
        name = display_name(manifest_path)

        try:
            root = _load_root(manifest_path)
        except ParseFailure as exc:
            logger.warning("Failed to parse %s: %s", manifest_path, exc)
            return ProjectRecord(
                identity=identity,
                display_name=name,
                path=str(manifest_path),
                parse_error=str(exc),
            )

        ns = _detect_namespace(root)
        scalars = _collect_scalars(root, ns)

        properties = {
            key: value
            for key, value in scalars.items()
            if key not in _STRUCTURED_PROPERTIES
        }
        sdk = (root.get("Sdk") or "").strip()
        if sdk:
            properties.setdefault("Sdk", sdk)

        record = ProjectRecord(
            identity=identity,
            display_name=name,
            path=str(manifest_path),
            target_frameworks=_target_frameworks(scalars),
            output_kind=_output_kind(scalars.get("OutputType")),
            project_references=self._project_references(root, ns, manifest_path),
            package_references=self._package_references(root, ns),
            properties=properties,
        )
        logger.debug(
            "Parsed %s: %d project reference(s), %d package reference(s)",
            manifest_path,
            len(record.project_references),
            len(record.package_references),
        )
        return record

    def _project_references(
        self, root: ET.Element, ns: str, manifest_path: Path
    ) -> Tuple[str, ...]:
        references: List[str] = []
        seen = set()
        for item in _iter_items(root, "ProjectReference", ns):
            include = (item.get("Include") or "").strip()
            if not include:
                continue
            ref_path = resolve_reference(manifest_path, include)
            ref_identity = canonical_identity(ref_path)
            if ref_identity in seen:
                continue
            seen.add(ref_identity)
            references.append(str(ref_path))
        return tuple(references)

    def _package_references(
        self, root: ET.Element, ns: str
    ) -> Tuple[PackageReference, ...]:
        packages: List[PackageReference] = []
        for item in _iter_items(root, "PackageReference", ns):
            name = (item.get("Include") or "").strip()
            if not name:
                continue
            version = (
                (item.get("Version") or "").strip()
                or _find_text(item, "Version", ns)
                or self.config.unknown_version
            )
            packages.append(PackageReference(name, version))
        return tuple(packages)


def read_manifest(path: PathLike, config: Optional[BuildConfig] = None) -> ProjectRecord:
    """Convenience wrapper around ``ManifestReader.read``."""
    return ManifestReader(config).read(path)


def _load_root(path: Path) -> ET.Element:
    try:
        return ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise ParseFailure(f"Malformed manifest: {exc}", path) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseFailure(f"Unreadable manifest: {exc}", path) from exc


def _detect_namespace(root: ET.Element) -> str:
    if root.tag.startswith("{"):
        return root.tag.split("}")[0][1:]
    return ""


def _ns_tag(tag: str, ns: str) -> str:
    return f"{{{ns}}}{tag}" if ns else tag


def _local_name(tag: str) -> str:
    return tag.split("}", 1)[1] if tag.startswith("{") else tag


def _find_text(elem: ET.Element, tag: str, ns: str) -> Optional[str]:
    target = elem.find(_ns_tag(tag, ns))
    if target is not None and target.text and target.text.strip():
        return target.text.strip()
    return None


def _iter_items(root: ET.Element, tag: str, ns: str) -> Iterator[ET.Element]:
    return root.iter(_ns_tag(tag, ns))


def _collect_scalars(root: ET.Element, ns: str) -> Dict[str, str]:
    """Collect scalar property-group entries; the first non-empty value wins."""
    scalars: Dict[str, str] = {}
    for group in root.iter(_ns_tag("PropertyGroup", ns)):
        for child in group:
            if not isinstance(child.tag, str) or len(child):
                continue
            text = (child.text or "").strip()
            if text:
                scalars.setdefault(_local_name(child.tag), text)
    return scalars


def _target_frameworks(scalars: Dict[str, str]) -> Tuple[str, ...]:
    single = scalars.get("TargetFramework")
    if single:
        return (single,)
    multiple = scalars.get("TargetFrameworks", "")
    return tuple(part.strip() for part in multiple.split(";") if part.strip())


def _output_kind(output_type: Optional[str]) -> OutputKind:
    if not output_type:
        return OutputKind.UNKNOWN
    if output_type.strip().lower() in _EXECUTABLE_OUTPUT_TYPES:
        return OutputKind.EXECUTABLE
    return OutputKind.LIBRARY


__all__ = ["ManifestReader", "read_manifest"]
