"""Filesystem listing and save endpoints."""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from duckfs.api.dependencies import get_app_settings, get_save_service, get_traversal_engine
from duckfs.core.config import Settings
from duckfs.core.exceptions import BadRequestError, ServiceUnavailableError
from duckfs.core.metrics import metrics
from duckfs.schemas import FileOperationResponse, ListResponse, SaveFileRequest
from duckfs.services.save_service import SaveError, SaveService
from duckfs.services.traversal import TraversalEngine, TraversalError
from duckfs.services.utils.errors import normalize_fs_error

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_depth(raw: Optional[str]) -> int:
    """Absent, unparseable or negative depths all mean 0."""
    if raw is None:
        return 0
    try:
        value = int(raw.strip())
    except ValueError:
        return 0
    return max(value, 0)


@router.get("", response_model=ListResponse, summary="List a directory or read a file")
async def list_path(
    path: Optional[str] = Query(None, description="Path under the served root"),
    depth: Optional[str] = Query(None, description="Recursion depth below the target"),
    engine: TraversalEngine = Depends(get_traversal_engine),
    settings: Settings = Depends(get_app_settings),
) -> ListResponse:
    if path is None:
        raise BadRequestError("Query parameter 'path' is required")
    max_depth = parse_depth(depth)

    with metrics.timed("fs.list") as timing:
        try:
            work = asyncio.to_thread(engine.list, path, max_depth)
            if settings.list_timeout_seconds:
                result = await asyncio.wait_for(work, timeout=settings.list_timeout_seconds)
            else:
                result = await work
        except asyncio.TimeoutError as exc:
            logger.warning("Listing %s abandoned after %ss", path, settings.list_timeout_seconds)
            raise ServiceUnavailableError("Listing timed out") from exc
        except TraversalError as exc:
            raise normalize_fs_error(exc) from exc

    logger.debug("Took %d ms listing %s (depth %d)", timing.duration_ms, path, max_depth)
    return ListResponse.model_validate({"data": result.to_payload()})


@router.post("/save", response_model=FileOperationResponse, summary="Overwrite one text file")
async def save_file(
    request: SaveFileRequest,
    save_service: SaveService = Depends(get_save_service),
) -> FileOperationResponse:
    try:
        written = await save_service.save(request.path, request.content)
    except (SaveError, OSError) as exc:
        logger.warning("Save error for %s: %s", request.path, exc)
        raise normalize_fs_error(exc, fallback="Failed to save file") from exc

    return FileOperationResponse(success=True, message="File saved", path=written)
