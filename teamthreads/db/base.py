"""SQLAlchemy declarative base and common mixins."""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Timezone-aware current time used for application-set timestamps."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all ORM models.

    All ORM models in this project should inherit from this base class.
    """

    pass


class UUIDMixin:
    """Mixin providing a UUID primary key.

    Adds an ``id`` column as a UUID primary key with auto-generated uuid4 default.
    """

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)


class TimestampMixin:
    """Mixin providing created_at and updated_at timestamps.

    ``created_at`` is set by the application at insert time so that rows
    created within the same transaction still order deterministically.
    ``updated_at`` refreshes on every row update via ``onupdate``.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )
