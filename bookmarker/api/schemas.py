"""
API Pydantic models for the bookmark service.

Request/response models used by the document, OCR and health endpoints.
Field names follow the browser client's camelCase.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    """Response model for a PDF upload"""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Upload id used by later requests")
    original_name: str = Field(..., alias="originalName")
    num_pages: int = Field(..., alias="numPages", ge=1)
    imported: int = Field(0, description="Root bookmarks imported from the document outline")


class BookmarkRequest(BaseModel):
    """Add or edit request for a single bookmark"""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    page: Any = Field(None, description="1-indexed page number")
    parent_id: Optional[str] = Field(None, alias="parentId", description="Add as child of this bookmark")


class BookmarkOut(BaseModel):
    """Bookmark node as stored in the session tree"""

    id: str
    title: str
    page: int
    children: List["BookmarkOut"] = Field(default_factory=list)


class BookmarkTreeResponse(BaseModel):
    """Full bookmark forest of a document session"""

    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., alias="documentId")
    num_pages: Optional[int] = Field(None, alias="numPages")
    bookmarks: List[BookmarkOut] = Field(default_factory=list)


class ProcessRequest(BaseModel):
    """Stateless outline embedding request"""

    id: Optional[str] = Field(None, description="Upload id")
    bookmarks: Any = Field(None, description="Forest of {title, page, children} entries")


class OCRResponse(BaseModel):
    """Text extracted from an image"""

    text: str
    formatted: str


class HealthResponse(BaseModel):
    """Health check response"""

    status: str
    timestamp: datetime
    version: str
    uptime: float
    system_info: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Error response model"""

    error: str
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=datetime.now)


BookmarkOut.model_rebuild()
