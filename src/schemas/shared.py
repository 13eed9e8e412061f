"""Shared schema components."""

from typing import Optional, Dict, Any, TypeVar, Generic, List
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime, timezone

T = TypeVar('T')


class BaseListResponse(BaseModel, Generic[T]):
    """Base class untuk semua list responses."""

    items: List[T]
    total: int
    page: int
    size: int
    pages: int

    @classmethod
    def create(cls, items: List[T], total: int, page: int, size: int):
        pages = (total + size - 1) // size if total > 0 else 0
        return cls(items=items, total=total, page=page, size=size, pages=pages)


class MessageResponse(BaseModel):
    """Generic message response."""

    success: bool = True
    message: str
    data: Optional[Dict[str, Any]] = None


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Body untuk semua error domain."""

    success: bool = False
    error: ErrorDetail
