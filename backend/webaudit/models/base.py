"""
Base model mixins for WebAudit.
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, Uuid, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class UUIDMixin:
    """Mixin for UUID primary key."""

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
    )


class CreatedAtMixin:
    """Mixin for an insert-only creation timestamp."""

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
        index=True,
    )


class BaseModel(UUIDMixin, CreatedAtMixin):
    """Base model with UUID and creation time."""

    __abstract__ = True