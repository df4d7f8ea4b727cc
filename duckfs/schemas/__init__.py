"""Pydantic schemas exposed by the application API."""
from .fs import (
    DirectoriesResult,
    DirectorySchema,
    FileContentsResult,
    FileOperationResponse,
    FileSchema,
    ListResponse,
    SaveFileRequest,
)

__all__ = [
    "DirectoriesResult",
    "DirectorySchema",
    "FileContentsResult",
    "FileOperationResponse",
    "FileSchema",
    "ListResponse",
    "SaveFileRequest",
]
