"""Repository layer for database access."""

from teamthreads.db.repositories.base import BaseRepository
from teamthreads.db.repositories.membership_repo import MembershipRepository
from teamthreads.db.repositories.message_repo import MessageRepository
from teamthreads.db.repositories.thread_repo import ThreadRepository

__all__ = ["BaseRepository", "MembershipRepository", "MessageRepository", "ThreadRepository"]
