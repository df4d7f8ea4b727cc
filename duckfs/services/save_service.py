"""Single-file overwrite used by the dashboard editor."""
from __future__ import annotations

import logging
import os
import posixpath

import aiofiles

logger = logging.getLogger(__name__)


class SaveError(Exception):
    """Base class for rejected or failed saves."""


class SavePathError(SaveError):
    """The target path is not acceptable."""


class ParentMissingError(SaveError):
    """The directory that should hold the file does not exist."""


class SaveService:
    """Write text to one file under the served root.

    Paths containing ``..`` are rejected; nothing else is checked.
    """

    def __init__(self, root: str = "/") -> None:
        self._root = root

    def resolve_target(self, path: str) -> str:
        if ".." in path.split("/"):
            raise SavePathError(f"Path must not contain '..': {path}")
        relative = path.strip().lstrip("/")
        if not relative or relative == ".":
            raise SavePathError("A file path is required")
        return posixpath.join(self._root, relative)

    async def save(self, path: str, content: str) -> str:
        """Overwrite the file named by ``path`` and return its absolute path."""
        target = self.resolve_target(path)
        parent = posixpath.dirname(target) or "/"
        if not os.path.isdir(parent):
            raise ParentMissingError(f"Parent directory does not exist: {parent}")

        async with aiofiles.open(target, "w", encoding="utf-8", newline="") as handle:
            await handle.write(content)
        logger.info("Saved %d characters to %s", len(content), target)
        return target
