"""Path normalization utilities for project identity.

Every component that compares or keys on project identity goes through
``canonical_identity``; raw path strings are never compared directly.
"""

import os
from pathlib import Path
from typing import Iterable, Union

PathLike = Union[str, os.PathLike]


def to_host_path(raw: PathLike) -> Path:
    """
    Convert a manifest-authored path to a host path.

    Solution and project files are usually written on Windows and use
    backslashes; forward slashes are accepted by every host, so backslashes
    are rewritten before the path is handed to ``pathlib``.

    Args:
        raw: Path as written in a descriptor, or any path-like object.

    Returns:
        Path with host separators.

    Examples:
        >>> to_host_path(r"..\\Core\\Core.csproj").as_posix()
        '../Core/Core.csproj'
    """
    return Path(os.fspath(raw).strip().replace("\\", "/"))


def absolute_path(raw: PathLike) -> Path:
    """Return the absolute, dot-segment-free host path for ``raw``."""
    return to_host_path(raw).resolve()


def canonical_identity(raw: PathLike) -> str:
    """
    Normalize a path to the canonical, comparison-safe project identity.

    The identity is the absolute path with ``/`` separators, lower-cased, so
    that two textually different references to the same manifest
    (``..\\Core\\core.csproj`` vs ``../core/Core.csproj``) collapse into one
    graph node.

    Args:
        raw: Absolute or relative path.

    Returns:
        Canonical identity string.
    """
    return absolute_path(raw).as_posix().lower()


def resolve_reference(manifest_path: PathLike, include: str) -> Path:
    """
    Resolve a reference relative to the directory of the declaring file.

    Args:
        manifest_path: Path of the manifest or workspace file that declares
            the reference.
        include: Reference path as written in the file.

    Returns:
        Absolute host path of the referenced file.
    """
    base_dir = absolute_path(manifest_path).parent
    return (base_dir / to_host_path(include)).resolve()


def display_name(path: PathLike) -> str:
    """Return the file name without its extension."""
    return to_host_path(path).stem


def has_extension(path: PathLike, extensions: Iterable[str]) -> bool:
    """Check the path suffix against lower-case extensions (``.csproj``)."""
    suffix = to_host_path(path).suffix.lower()
    return suffix in set(extensions)
