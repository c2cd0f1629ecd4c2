"""Canonical graph models.

``ProjectRecord`` is the single source of truth for what a parsed manifest
contributes to the graph; ``Diagnostic`` carries the non-fatal problems met
while building it.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Annotated, Dict, Mapping, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from slngraph.utils.path_utils import canonical_identity


class OutputKind(str, Enum):
    """Classification of a node's build output."""

    LIBRARY = "Library"
    EXECUTABLE = "Executable"
    UNKNOWN = "Unknown"
    WORKSPACE = "Workspace"


class DiagnosticKind(str, Enum):
    """Kinds of non-fatal problems collected during a build."""

    PARSE_FAILURE = "parse_failure"
    DANGLING_REFERENCE = "dangling_reference"
    MISSING_MANIFEST = "missing_manifest"
    SELF_REFERENCE = "self_reference"


class PackageReference(NamedTuple):
    """External package dependency as declared in a manifest."""

    name: str
    version: str


class ProjectRecord(BaseModel):
    """One parsed project manifest (or the workspace pseudo-node)."""

    model_config = ConfigDict(frozen=True)

    identity: Annotated[str, Field(..., description="Canonical node identifier")]
    display_name: Annotated[
        str, Field(..., description="File name without extension, presentation only")
    ]
    path: Annotated[str, Field(..., description="Absolute host path of the file")]
    target_frameworks: Tuple[str, ...] = ()
    output_kind: OutputKind = OutputKind.UNKNOWN
    project_references: Annotated[
        Tuple[str, ...],
        Field(
            default=(),
            description="Declared project references as absolute host paths",
        ),
    ]
    package_references: Tuple[PackageReference, ...] = ()
    properties: Mapping[str, str] = Field(default_factory=lambda: MappingProxyType({}))
    parse_error: Optional[str] = None

    @field_validator("properties", mode="after")
    @classmethod
    def freeze_properties(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(v))

    @field_serializer("properties")
    def dump_properties(self, v: Mapping[str, str]) -> Dict[str, str]:
        return dict(v)

    @property
    def is_workspace(self) -> bool:
        """True for the workspace pseudo-node."""
        return self.output_kind is OutputKind.WORKSPACE

    @property
    def is_stub(self) -> bool:
        """True when the manifest could not be parsed."""
        return self.parse_error is not None

    @property
    def reference_identities(self) -> Tuple[str, ...]:
        """Canonical identities of the declared project references."""
        return tuple(canonical_identity(ref) for ref in self.project_references)

    @classmethod
    def workspace(cls, identity: str, display_name: str, path: str) -> "ProjectRecord":
        """Build the pseudo-node representing a workspace descriptor."""
        return cls(
            identity=identity,
            display_name=display_name,
            path=path,
            output_kind=OutputKind.WORKSPACE,
        )


class Diagnostic(BaseModel):
    """A non-fatal problem recorded alongside a (possibly partial) graph."""

    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind
    path: str
    message: str
    source: Optional[str] = None

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "OutputKind",
    "PackageReference",
    "ProjectRecord",
]
