"""Configuration schema definitions using Pydantic for validation.

Using Pydantic ensures configuration errors are caught early with clear
error messages instead of surfacing halfway through a graph build.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator, model_validator

from slngraph.utils.path_utils import PathLike, has_extension


class BuildConfig(BaseModel):
    """Top-level configuration for graph building.

    Attributes:
        manifest_extensions: File extensions recognized as project manifests.
        workspace_extensions: File extensions recognized as workspace
            descriptors.
        unknown_version: Sentinel recorded for package references that
            declare no version.
        max_workers: Number of threads used to read manifests of one
            traversal frontier concurrently (1 = sequential).
    """

    manifest_extensions: List[str] = Field(default_factory=lambda: [".csproj"])
    workspace_extensions: List[str] = Field(default_factory=lambda: [".sln"])
    unknown_version: str = Field(default="unknown", min_length=1)
    max_workers: int = Field(default=1, ge=1, le=64)

    @field_validator("manifest_extensions", "workspace_extensions")
    @classmethod
    def normalize_extensions(cls, v: List[str]) -> List[str]:
        """Lower-case extensions and make sure each starts with a dot."""
        if not v:
            raise ValueError("at least one extension is required")
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext or ext == ".":
                raise ValueError(f"Invalid extension: {ext!r}")
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        return normalized

    @model_validator(mode="after")
    def check_disjoint_extensions(self) -> "BuildConfig":
        """An extension cannot name both a manifest and a workspace file."""
        shared = sorted(set(self.manifest_extensions) & set(self.workspace_extensions))
        if shared:
            raise ValueError(
                f"Extensions used for both manifests and workspaces: {', '.join(shared)}"
            )
        return self

    def is_manifest(self, path: PathLike) -> bool:
        """Return True when ``path`` has a project manifest extension."""
        return has_extension(path, self.manifest_extensions)

    def is_workspace(self, path: PathLike) -> bool:
        """Return True when ``path`` has a workspace descriptor extension."""
        return has_extension(path, self.workspace_extensions)

    @classmethod
    def default(cls) -> "BuildConfig":
        """Return the built-in configuration."""
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildConfig":
        """Create configuration from dictionary.

        Raises:
            ValidationError: If configuration is invalid.
        """
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()
