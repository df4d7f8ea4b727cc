"""Depth-limited directory listing over a served filesystem subtree.

``TraversalEngine.list`` maps a user supplied path onto the served root,
canonicalizes it and returns either the text of a regular file or a sorted
list of ``Directory`` records produced by a depth-first walk.

Only three things abort a listing: the target cannot be resolved (or its own
directory cannot be enumerated), the target is neither file nor directory,
or a file target cannot be read as text. Failures on individual entries or
nested subtrees are logged and the entry is left out.
"""
from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional

from duckfs.models.listing import (
    Directories,
    Directory,
    EntryKind,
    File,
    FileContents,
    ListResult,
    file_from_stat,
    lossy_text,
)
from duckfs.services.fs_accessor import FilesystemAccessor

ROOT_DEPTH_CAP = 1
_ROOT_ALIASES = {"", "/", "."}


class TraversalError(Exception):
    """Base class for errors that abort a listing."""


class PathLookupError(TraversalError):
    """The requested path could not be resolved under the served root."""


class InvalidTargetError(TraversalError):
    """The resolved path is neither a regular file nor a directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Path is neither file nor directory: {path}")
        self.path = path


class FileReadError(TraversalError):
    """The target is a file but its contents are not readable text."""


@dataclass(frozen=True, slots=True)
class _PendingDirectory:
    path: str
    depth: int


def _sort_key(name: str) -> str:
    return name.lower()


def _is_within(path: str, root: str) -> bool:
    if root == "/":
        return path.startswith("/")
    return path == root or path.startswith(root.rstrip("/") + "/")


class TraversalEngine:
    """Stateless listing engine; one instance can serve concurrent calls."""

    def __init__(
        self,
        filesystem: FilesystemAccessor,
        *,
        root: str = "/",
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not root.startswith("/"):
            raise ValueError(f"root must be absolute, got {root!r}")
        self._fs = filesystem
        self._root = root
        self._logger = logger or logging.getLogger(__name__)

    def join_onto_root(self, path: str) -> str:
        """Map user input onto the served root without touching the filesystem."""
        if path in _ROOT_ALIASES:
            return self._root
        relative = path.lstrip("/")
        if not relative:
            return self._root
        return posixpath.join(self._root, relative)

    def _canonicalize(self, path: str) -> str:
        try:
            return self._fs.canonicalize(path)
        except (OSError, ValueError) as exc:
            self._logger.warning("Failed to canonicalize path '%s': %s", path, exc)
            raise PathLookupError(f"Cannot resolve path '{path}': {exc}") from exc

    def normalize_path(self, path: str) -> str:
        """Return the canonical absolute path that ``path`` names."""
        return self._resolve(path, self._canonicalize(self._root))

    def _resolve(self, path: str, canonical_root: str) -> str:
        canonical = self._canonicalize(self.join_onto_root(path))
        if not _is_within(canonical, canonical_root):
            self._logger.warning("Path '%s' resolves outside the served root: %s", path, canonical)
            raise PathLookupError(f"Path '{path}' resolves outside the served root")
        return canonical

    @staticmethod
    def effective_max_depth(target: str, canonical_root: str, max_depth: int) -> int:
        if target == canonical_root:
            return min(max_depth, ROOT_DEPTH_CAP)
        return max_depth

    def list(self, path: str, max_depth: int = 0) -> ListResult:
        """List ``path`` recursively up to ``max_depth`` levels, or read it if it is a file."""
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")

        canonical_root = self._canonicalize(self._root)
        target = self._resolve(path, canonical_root)
        self._logger.info("Listing path: %s (resolved: %s)", path, target)

        try:
            target_stat = self._fs.stat(target)
        except OSError as exc:
            raise PathLookupError(f"Cannot stat '{target}': {exc}") from exc

        if target_stat.kind is EntryKind.FILE:
            self._logger.debug("Path is a file: reading contents")
            try:
                return FileContents(self._fs.read_text(target))
            except (OSError, UnicodeDecodeError) as exc:
                raise FileReadError(f"Cannot read '{target}' as text: {exc}") from exc

        if target_stat.kind is not EntryKind.DIRECTORY:
            raise InvalidTargetError(target)

        depth_limit = self.effective_max_depth(target, canonical_root, max_depth)
        self._logger.debug("Listing directory %s (effective depth: %d)", target, depth_limit)
        return Directories(tuple(self._walk(target, depth_limit)))

    def _walk(self, start: str, max_depth: int) -> list[Directory]:
        collected: list[Directory] = []
        stack = [_PendingDirectory(start, 0)]

        while stack:
            pending = stack.pop()
            try:
                directory, children = self._visit(pending, max_depth)
            except OSError as exc:
                if pending.path == start:
                    raise PathLookupError(f"Cannot enumerate '{start}': {exc}") from exc
                self._logger.warning("Failed recursing into %s: %s", pending.path, exc)
                continue
            collected.append(directory)
            # Reversed so the first child is popped next.
            stack.extend(reversed(children))

        collected.sort(key=lambda item: PurePosixPath(item.path).parts)
        return collected

    def _visit(
        self, pending: _PendingDirectory, max_depth: int
    ) -> tuple[Directory, list[_PendingDirectory]]:
        files: list[File] = []
        subdirectories: list[tuple[str, str]] = []

        for name, entry_path in self._fs.enumerate(pending.path):
            try:
                entry = self._fs.stat(entry_path)
            except OSError as exc:
                self._logger.warning("Skipping entry %s: %s", entry_path, exc)
                continue

            if entry.kind is EntryKind.FILE:
                files.append(file_from_stat(name, entry))
            elif entry.kind is EntryKind.DIRECTORY:
                subdirectories.append((name, entry_path))
            else:
                self._logger.debug("Ignoring non-regular entry %s", entry_path)

        files.sort(key=lambda item: _sort_key(item.name))
        subdirectories.sort(key=lambda item: _sort_key(item[0]))

        children: list[_PendingDirectory] = []
        if pending.depth < max_depth:
            children = [_PendingDirectory(sub_path, pending.depth + 1) for _, sub_path in subdirectories]

        directory = Directory(
            path=lossy_text(pending.path),
            files=tuple(files),
            subdirectories=tuple(name for name, _ in subdirectories),
        )
        return directory, children
