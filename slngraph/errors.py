"""Error taxonomy for graph construction.

Fatal errors abort a build and carry the offending path so the CLI can
print a single readable message. Recoverable errors describe conditions
the builder tolerates; they are reported as diagnostics on the graph
instead of propagating to the caller.
"""

from __future__ import annotations

import os
from typing import Optional, Union


class SlnGraphError(Exception):
    """Base class for all slngraph errors."""

    def __init__(
        self, message: str, path: Optional[Union[str, os.PathLike]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = os.fspath(path) if path is not None else None

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Fatal errors
# =============================================================================

class FatalError(SlnGraphError):
    """Errors that abort the whole build."""
    pass


class NotFoundError(FatalError):
    """Entry file (workspace descriptor or explicit manifest) does not exist."""
    pass


class UnsupportedInputError(FatalError):
    """Input file type is not a recognized workspace or project manifest."""
    pass


class BuildCancelledError(FatalError):
    """The host asked the build to stop before the queue drained."""
    pass


# =============================================================================
# Recoverable errors
# =============================================================================

class RecoverableError(SlnGraphError):
    """Errors that skip the current item and let the build continue."""
    pass


class ParseFailure(RecoverableError):
    """Manifest content is malformed or unreadable."""
    pass


class DanglingReferenceError(RecoverableError):
    """Declared project reference does not resolve to an existing file."""
    pass


__all__ = [
    "BuildCancelledError",
    "DanglingReferenceError",
    "FatalError",
    "NotFoundError",
    "ParseFailure",
    "RecoverableError",
    "SlnGraphError",
    "UnsupportedInputError",
]
