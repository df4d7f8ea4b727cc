"""Map exceptions escaping the routes onto JSON error bodies.

Every error body carries ``detail``; domain errors add a machine-readable
``error`` code and, when they have one, a ``meta`` object. Failure metrics
are recorded by the request middleware from the response status.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import HTTP_422_UNPROCESSABLE_CONTENT, HTTP_500_INTERNAL_SERVER_ERROR

from duckfs.core.exceptions import DomainError
from duckfs.core.logging import APP_LOGGER_NAME

logger = logging.getLogger(APP_LOGGER_NAME)


def error_response(
    status_code: int,
    detail: Any,
    *,
    error: Optional[str] = None,
    meta: Optional[dict[str, Any]] = None,
) -> JSONResponse:
    content: dict[str, Any] = {"detail": detail}
    if error:
        content["error"] = error
    if meta:
        content["meta"] = meta
    return JSONResponse(status_code=status_code, content=content)


def validation_details(exc: RequestValidationError) -> list[dict[str, Any]]:
    # ``ctx`` can hold exception instances that do not serialize.
    return [{key: value for key, value in item.items() if key != "ctx"} for item in exc.errors()]


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "Request failed (%s %s): %s",
            request.method,
            request.url.path,
            exc.detail,
            exc_info=exc.__cause__ or exc,
        )
    else:
        logger.warning("Request rejected (%s %s): %s", request.method, request.url.path, exc.detail)
    return error_response(exc.status_code, exc.detail, error=exc.error_code, meta=exc.extra)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = validation_details(exc)
    logger.warning("Validation error (%s %s): %s", request.method, request.url.path, details)
    return error_response(HTTP_422_UNPROCESSABLE_CONTENT, details, error="validation_error")


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", error="internal_error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the handlers above to ``app``."""
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
