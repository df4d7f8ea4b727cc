"""Common exception helpers for the HTTP layer."""
from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base exception for application specific errors."""

    status_code = 500
    error_code = "app_error"
    default_detail = "An unexpected error occurred."

    def __init__(self, detail: str | None = None, *, extra: dict[str, Any] | None = None) -> None:
        super().__init__(detail or self.default_detail)
        self.detail = detail or self.default_detail
        self.extra = extra or {}


class DomainError(AppError):
    """Normalized domain error surfaced to API handlers."""


class BadRequestError(DomainError):
    status_code = 400
    error_code = "bad_request"
    default_detail = "Invalid request."


class NotFoundError(DomainError):
    status_code = 404
    error_code = "not_found"
    default_detail = "Resource not found."


class ServiceUnavailableError(DomainError):
    status_code = 503
    error_code = "service_unavailable"
    default_detail = "Service unavailable."


class InternalError(DomainError):
    status_code = 500
    error_code = "internal_error"
    default_detail = "Internal server error."


class PathLookupFailed(InternalError):
    error_code = "path_lookup_failed"
    default_detail = "Path could not be resolved."


class InvalidTarget(InternalError):
    error_code = "invalid_target"
    default_detail = "Path is neither a file nor a directory."


class ReadFailed(InternalError):
    error_code = "read_failed"
    default_detail = "File could not be read as text."


class WriteFailed(InternalError):
    error_code = "write_failed"
    default_detail = "File could not be written."
