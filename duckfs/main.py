"""FastAPI application entrypoint."""
from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.datastructures import MutableHeaders
from starlette.requests import Request

from duckfs import __version__
from duckfs.api.error_handlers import register_exception_handlers
from duckfs.api.router import api_router
from duckfs.core.config import Settings, get_settings
from duckfs.core.logging import APP_LOGGER_NAME, configure_logging
from duckfs.core.metrics import metrics
from duckfs.core.request_context import REQUEST_ID_HEADER, accept_request_id, request_context
from duckfs.services.fs_accessor import FilesystemAccessor
from duckfs.services.registry import ServiceRegistry
from duckfs.web.routes import mount_dashboard

logger = logging.getLogger(APP_LOGGER_NAME)


class RequestIdMiddleware:
    """Tag every HTTP request with an id; time the ones under ``/api``."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive=receive)
        path = scope.get("path") or ""
        metric_name = f"api.{path}" if path.startswith("/api") else None
        request_id = accept_request_id(request.headers.get(REQUEST_ID_HEADER))

        with request_context(request_id), metrics.timed(metric_name, alert=True) as timing:

            async def send_wrapper(message):
                if message["type"] == "http.response.start":
                    timing.failed = message.get("status", 500) >= 400
                    headers = MutableHeaders(scope=message)
                    headers[REQUEST_ID_HEADER] = request_id
                await send(message)

            await self.app(scope, receive, send_wrapper)


def create_app(
    settings: Settings | None = None,
    *,
    filesystem: FilesystemAccessor | None = None,
) -> FastAPI:
    """Build the ASGI application for ``settings`` (defaults to the loaded config)."""

    settings = settings or get_settings()
    configure_logging(settings)
    registry = ServiceRegistry(settings, filesystem=filesystem)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await registry.startup()
        try:
            yield
        finally:
            await registry.shutdown()

    app = FastAPI(
        title="duckfs",
        description="Browse a filesystem subtree over HTTP",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.services = registry

    app.add_middleware(GZipMiddleware, minimum_size=settings.gzip_minimum_size)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)
    if mount_dashboard(app, settings.static_dir):
        logger.info("Serving dashboard from %s", settings.static_dir)
    register_exception_handlers(app)
    return app
