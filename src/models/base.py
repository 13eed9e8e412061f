"""Base model with common fields."""

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Current time, timezone-aware UTC."""
    return datetime.now(timezone.utc)


class TimestampMixin(SQLModel):
    """Mixin for row timestamps (UTC)."""
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))


class AuditMixin(SQLModel):
    """Mixin for audit fields - user id yang membuat / mengubah."""
    created_by: Optional[str] = Field(default=None, max_length=36)
    updated_by: Optional[str] = Field(default=None, max_length=36)


class SoftDeleteMixin(SQLModel):
    """Mixin for soft delete; rows are filtered by deleted_at IS NULL."""
    deleted_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    deleted_by: Optional[str] = Field(default=None, max_length=36)


class BaseModel(TimestampMixin, SoftDeleteMixin, AuditMixin):
    """Base model with all common fields."""
    pass
