"""Root API router that aggregates all endpoint modules."""
from fastapi import APIRouter

from duckfs.api.routes import fs, health

api_router = APIRouter(prefix="/api")
api_router.include_router(fs.router, prefix="/fs", tags=["fs"])
api_router.include_router(health.router, tags=["health"])
