"""Domain models produced by a directory listing."""
from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class EntryKind(str, Enum):
    """Classification of one filesystem entry."""

    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class EntryStat:
    """Metadata snapshot returned by the filesystem accessor."""

    kind: EntryKind
    size: int
    readonly: bool
    created: Optional[int] = None
    modified: Optional[int] = None
    accessed: Optional[int] = None


@dataclass(frozen=True, slots=True)
class File:
    name: str
    size: int
    readonly: bool
    created: Optional[int]
    modified: Optional[int]
    accessed: Optional[int]

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "readonly": self.readonly,
            "created": self.created,
            "modified": self.modified,
            "accessed": self.accessed,
        }


@dataclass(frozen=True, slots=True)
class Directory:
    """One directory level: its files plus the names of its subdirectories."""

    path: str
    files: tuple[File, ...]
    subdirectories: tuple[str, ...]

    def to_payload(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "files": [item.to_payload() for item in self.files],
            "subdirectories": list(self.subdirectories),
        }


@dataclass(frozen=True, slots=True)
class Directories:
    """Listing variant: the target was a directory."""

    directories: tuple[Directory, ...]

    def to_payload(self) -> dict[str, Any]:
        return {"Directories": [item.to_payload() for item in self.directories]}


@dataclass(frozen=True, slots=True)
class FileContents:
    """Listing variant: the target was a regular file."""

    text: str

    def to_payload(self) -> dict[str, Any]:
        return {"FileContents": self.text}


ListResult = Union[Directories, FileContents]


def lossy_text(value: str) -> str:
    """Replace undecodable filename bytes with U+FFFD so the text serializes as UTF-8."""
    return os.fsencode(value).decode("utf-8", "replace")


def file_from_stat(name: str, stat: EntryStat) -> File:
    """Build the File record for an entry called ``name``."""
    return File(
        name=name,
        size=stat.size,
        readonly=stat.readonly,
        created=stat.created,
        modified=stat.modified,
        accessed=stat.accessed,
    )
