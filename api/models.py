"""
API models and schemas for the book records service.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BookPayload(BaseModel):
    """
    Request body for creating or replacing a book.

    Every field is optional at the schema level so that a missing field is
    reported with the service's own validation message instead of a generic
    schema error.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    title: Optional[str] = Field(None, description="Book title")
    author: Optional[str] = Field(None, description="Book author")
    publish_year: Optional[int] = Field(None, alias="publishYear", description="Year of publication")

    def has_required_fields(self) -> bool:
        """Return True when title, author and publishYear are all present and non-empty."""
        return bool(self.title) and bool(self.author) and bool(self.publish_year)

    def to_document(self) -> Dict[str, Any]:
        """Fields as stored in the books collection."""
        return {
            "title": self.title,
            "author": self.author,
            "publishYear": self.publish_year,
        }


class BookResponse(BaseModel):
    """Book record as returned by the API."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Unique book identifier")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    publish_year: int = Field(..., alias="publishYear", description="Year of publication")
    created_at: Optional[str] = Field(None, alias="createdAt", description="Creation timestamp")
    updated_at: Optional[str] = Field(None, alias="updatedAt", description="Last update timestamp")


class BookListResponse(BaseModel):
    """Response model for the full book listing."""
    count: int = Field(..., description="Number of books returned")
    data: List[BookResponse] = Field(..., description="List of books")


class MessageResponse(BaseModel):
    """Plain message response used for updates and deletions."""
    message: str = Field(..., description="Result message")


class ErrorResponse(BaseModel):
    """Error response model."""
    message: str = Field(..., description="Error message")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
