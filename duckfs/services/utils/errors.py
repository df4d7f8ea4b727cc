"""Service error normalization helpers."""
from __future__ import annotations

from duckfs.core.exceptions import (
    BadRequestError,
    DomainError,
    InternalError,
    InvalidTarget,
    NotFoundError,
    PathLookupFailed,
    ReadFailed,
    WriteFailed,
)
from duckfs.models.listing import lossy_text
from duckfs.services.save_service import ParentMissingError, SavePathError
from duckfs.services.traversal import (
    FileReadError,
    InvalidTargetError,
    PathLookupError,
)


def normalize_fs_error(exc: Exception, *, fallback: str = "Filesystem operation failed") -> DomainError:
    if isinstance(exc, DomainError):
        return exc
    # Resolved paths may carry undecodable filename bytes.
    message = lossy_text(str(exc))
    if isinstance(exc, PathLookupError):
        return PathLookupFailed(message)
    if isinstance(exc, InvalidTargetError):
        return InvalidTarget(message, extra={"path": lossy_text(exc.path)})
    if isinstance(exc, FileReadError):
        return ReadFailed(message)
    if isinstance(exc, SavePathError):
        return BadRequestError(message)
    if isinstance(exc, ParentMissingError):
        return NotFoundError(message)
    if isinstance(exc, OSError):
        return WriteFailed(message or fallback)
    return InternalError(message or fallback)
