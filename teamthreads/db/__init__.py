"""Database base classes, mixins, and engine utilities."""

from teamthreads.db.base import Base, TimestampMixin, UUIDMixin, utcnow
from teamthreads.db.engine import get_engine, get_session

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "get_engine",
    "get_session",
    "utcnow",
]
