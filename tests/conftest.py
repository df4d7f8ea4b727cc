"""Shared fixtures: an in-memory filesystem fake and an HTTP client."""
from __future__ import annotations

import posixpath

import pytest
from httpx import ASGITransport, AsyncClient

from duckfs.core.config import Settings
from duckfs.core.metrics import metrics
from duckfs.main import create_app
from duckfs.models.listing import EntryKind, EntryStat


class InMemoryFilesystem:
    """FilesystemAccessor over a dict tree, with injectable failures."""

    def __init__(self) -> None:
        self._stats: dict[str, EntryStat] = {"/": EntryStat(EntryKind.DIRECTORY, 4096, False)}
        self._children: dict[str, list[str]] = {"/": []}
        self._texts: dict[str, str] = {}
        self.denied_stats: set[str] = set()
        self.denied_dirs: set[str] = set()
        self.enumerated: list[str] = []

    def _attach(self, path: str, stat: EntryStat) -> None:
        parent = posixpath.dirname(path)
        if parent not in self._children:
            self.add_dir(parent)
        self._stats[path] = stat
        self._children[parent].append(path)

    def add_dir(self, path: str) -> None:
        if path in self._stats:
            return
        self._attach(path, EntryStat(EntryKind.DIRECTORY, 4096, False))
        self._children[path] = []

    def add_file(self, path: str, text: str = "", *, readonly: bool = False) -> None:
        self._attach(
            path,
            EntryStat(EntryKind.FILE, len(text.encode()), readonly, None, 1_700_000_000, 1_700_000_100),
        )
        self._texts[path] = text

    def add_other(self, path: str) -> None:
        self._attach(path, EntryStat(EntryKind.OTHER, 0, False))

    def canonicalize(self, path: str) -> str:
        normalized = posixpath.normpath(path)
        if normalized.startswith("//"):
            normalized = "/" + normalized.lstrip("/")
        if normalized not in self._stats:
            raise FileNotFoundError(2, "No such file or directory", path)
        return normalized

    def stat(self, path: str) -> EntryStat:
        if path in self.denied_stats:
            raise PermissionError(13, "Permission denied", path)
        try:
            return self._stats[path]
        except KeyError:
            raise FileNotFoundError(2, "No such file or directory", path) from None

    def enumerate(self, directory: str) -> list[tuple[str, str]]:
        self.enumerated.append(directory)
        if directory in self.denied_dirs:
            raise PermissionError(13, "Permission denied", directory)
        return [(posixpath.basename(child), child) for child in self._children[directory]]

    def read_text(self, path: str) -> str:
        return self._texts[path]


@pytest.fixture
def memory_fs() -> InMemoryFilesystem:
    return InMemoryFilesystem()


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def settings(monkeypatch) -> Settings:
    for name in ("DUCKFS_ROOT", "DUCKFS_STATIC_DIR", "DUCKFS_LIST_TIMEOUT_SECONDS", "DUCKFS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return Settings(log_level="DEBUG")


@pytest.fixture
def make_client():
    """Return an async context manager factory bound to a freshly built app."""

    def factory(app_settings: Settings, **kwargs) -> AsyncClient:
        app = create_app(app_settings, **kwargs)
        transport = ASGITransport(app=app)
        return AsyncClient(transport=transport, base_url="http://test")

    return factory


@pytest.fixture
async def client(make_client, settings):
    async with make_client(settings) as c:
        yield c
