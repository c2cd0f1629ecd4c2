"""Entry detection for directory inputs."""

import logging
from pathlib import Path
from typing import List, Optional

from slngraph.config.schema import BuildConfig
from slngraph.errors import NotFoundError, UnsupportedInputError
from slngraph.utils.path_utils import PathLike, absolute_path

logger = logging.getLogger("slngraph.parsers.detector")


def _candidates(directory: Path, extensions: List[str]) -> List[Path]:
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix.lower() in extensions
    )


def detect_entry(path: PathLike, config: Optional[BuildConfig] = None) -> Path:
    """Pick the entry file for ``path``.

    Files are returned unchanged. For a directory, the single workspace
    descriptor directly inside it wins; otherwise the single project
    manifest. Subdirectories are not scanned.

    Args:
        path: File or directory given by the caller.
        config: Build configuration providing the recognized extensions.

    Returns:
        Absolute path of the entry file.

    Raises:
        NotFoundError: If ``path`` does not exist.
        UnsupportedInputError: If the directory holds no candidate or more
            than one candidate of the winning kind.
    """
    cfg = config or BuildConfig.default()
    target = absolute_path(path)

    if not target.exists():
        raise NotFoundError(f"File not found: {target}", target)
    if not target.is_dir():
        return target

    for kind, extensions in (
        ("workspace", cfg.workspace_extensions),
        ("project", cfg.manifest_extensions),
    ):
        found = _candidates(target, extensions)
        if len(found) == 1:
            logger.info("Detected %s file: %s", kind, found[0])
            return found[0]
        if len(found) > 1:
            names = ", ".join(p.name for p in found)
            raise UnsupportedInputError(
                f"Multiple {kind} files in {target}: {names}; pass one explicitly",
                target,
            )

    raise UnsupportedInputError(
        f"No workspace or project file found in {target}", target
    )


__all__ = ["detect_entry"]
