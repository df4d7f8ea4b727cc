"""Host filesystem access used by the traversal engine."""
from __future__ import annotations

import math
import os
import stat as stat_module
from typing import Optional, Protocol

from duckfs.models.listing import EntryKind, EntryStat, lossy_text

_WRITE_BITS = stat_module.S_IWUSR | stat_module.S_IWGRP | stat_module.S_IWOTH


class FilesystemAccessor(Protocol):
    """Minimal filesystem surface consumed by ``TraversalEngine``.

    Every method raises ``OSError`` (or a subclass) on failure.
    """

    def canonicalize(self, path: str) -> str: ...

    def stat(self, path: str) -> EntryStat: ...

    def enumerate(self, directory: str) -> list[tuple[str, str]]:
        """Return ``(display name, path)`` pairs; the path is what ``stat`` accepts."""
        ...

    def read_text(self, path: str) -> str: ...


def _epoch_seconds(value: Optional[float]) -> Optional[int]:
    if value is None or value < 0:
        return None
    return math.floor(value)


def entry_stat_from_os(result: os.stat_result) -> EntryStat:
    """Convert an ``os.stat_result`` into an ``EntryStat``."""
    mode = result.st_mode
    if stat_module.S_ISREG(mode):
        kind = EntryKind.FILE
    elif stat_module.S_ISDIR(mode):
        kind = EntryKind.DIRECTORY
    else:
        kind = EntryKind.OTHER
    return EntryStat(
        kind=kind,
        size=result.st_size,
        readonly=not (mode & _WRITE_BITS),
        # Birth time is missing on most Linux builds.
        created=_epoch_seconds(getattr(result, "st_birthtime", None)),
        modified=_epoch_seconds(result.st_mtime),
        accessed=_epoch_seconds(result.st_atime),
    )


class LocalFilesystem:
    """``FilesystemAccessor`` backed by the local operating system."""

    def canonicalize(self, path: str) -> str:
        # realpath reports symlink loops as OSError(ELOOP).
        return os.path.realpath(path, strict=True)

    def stat(self, path: str) -> EntryStat:
        return entry_stat_from_os(os.stat(path, follow_symlinks=False))

    def enumerate(self, directory: str) -> list[tuple[str, str]]:
        with os.scandir(directory) as entries:
            return [(lossy_text(entry.name), entry.path) for entry in entries]

    def read_text(self, path: str) -> str:
        with open(path, "r", encoding="utf-8", errors="strict", newline="") as handle:
            return handle.read()
