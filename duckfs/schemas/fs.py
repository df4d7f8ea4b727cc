"""Schemas for the filesystem listing and save endpoints."""
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FileSchema(BaseModel):
    """Metadata of one regular file."""

    name: str
    size: int
    readonly: bool
    created: Optional[int] = None
    modified: Optional[int] = None
    accessed: Optional[int] = None


class DirectorySchema(BaseModel):
    """One directory level."""

    path: str
    files: List[FileSchema]
    subdirectories: List[str]


class DirectoriesResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    Directories: List[DirectorySchema]


class FileContentsResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    FileContents: str


class ListResponse(BaseModel):
    """Listing envelope: ``data`` holds exactly one of the two variants."""

    data: Union[DirectoriesResult, FileContentsResult]


class SaveFileRequest(BaseModel):
    path: str = Field(..., description="File path under the served root")
    content: str = Field(..., description="Full text to write")


class FileOperationResponse(BaseModel):
    success: bool
    message: str
    path: Optional[str] = None
