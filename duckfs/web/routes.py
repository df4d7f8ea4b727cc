"""Routes serving the built single-page dashboard."""
from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from duckfs.core.exceptions import NotFoundError

INDEX_FILE = "index.html"


def _resolve_asset(static_dir: Path, requested: str) -> Path | None:
    candidate = (static_dir / requested).resolve()
    if not candidate.is_relative_to(static_dir) or not candidate.is_file():
        return None
    return candidate


def build_spa_router(static_dir: Path) -> APIRouter:
    """Serve files from ``static_dir`` and fall back to index.html for client routes."""

    static_dir = static_dir.resolve()
    index_path = static_dir / INDEX_FILE
    router = APIRouter()

    @router.get("/{full_path:path}", include_in_schema=False)
    async def spa_fallback(full_path: str) -> FileResponse:
        if full_path == "api" or full_path.startswith("api/"):
            raise NotFoundError(f"Unknown API route: /{full_path}")
        asset = _resolve_asset(static_dir, full_path) if full_path else None
        if asset is not None:
            return FileResponse(asset)
        if not index_path.is_file():
            raise NotFoundError("Dashboard is not built")
        response = FileResponse(index_path)
        response.headers["Cache-Control"] = "no-store"
        return response

    return router


def mount_dashboard(app: FastAPI, static_dir: str | None) -> bool:
    """Attach the dashboard to ``app``; returns False when there is nothing to serve."""

    if not static_dir:
        return False
    directory = Path(static_dir)
    if not directory.is_dir():
        return False
    assets = directory / "assets"
    if assets.is_dir():
        app.mount("/assets", StaticFiles(directory=str(assets)), name="assets")
    app.include_router(build_spa_router(directory))
    return True
