"""Health check and metrics endpoints."""
import time

from fastapi import APIRouter, Depends

from duckfs.api.dependencies import get_app_settings
from duckfs.core.config import Settings
from duckfs.core.metrics import metrics

SERVER_START_TIME = time.time()

router = APIRouter()


@router.get("/health", summary="Health check")
async def health_check(settings: Settings = Depends(get_app_settings)) -> dict:
    return {
        "status": "ok",
        "root": settings.root,
        "uptime_seconds": round(max(0.0, time.time() - SERVER_START_TIME), 1),
    }


@router.get("/metrics", summary="Return aggregated API metrics")
async def read_metrics() -> dict:
    return {
        "metrics": metrics.snapshot(),
    }
