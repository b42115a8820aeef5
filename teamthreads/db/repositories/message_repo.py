"""Thread message repository with keyset pagination and reply queries."""

import logging
from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, case, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.db.models.thread import ThreadMessageORM, ThreadParticipantORM
from teamthreads.db.models.user import UserORM
from teamthreads.db.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository[ThreadMessageORM]):
    """Repository for thread_message rows.

    Args:
        session: AsyncSession for database operations.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ThreadMessageORM)

    async def list_top_level(
        self,
        thread_id: UUID,
        limit: int,
        before: Optional[tuple[datetime, UUID]] = None,
    ) -> list[ThreadMessageORM]:
        """List top-level messages newest first, strictly after a keyset position.

        Ordering is ``created_at DESC, id DESC``. Rows inserted later than
        the first page sort ahead of it and never shift an issued cursor.

        Args:
            thread_id: UUID of the thread.
            limit: Max rows to return.
            before: Optional (created_at, id) of the last row already returned.

        Returns:
            Up to ``limit`` top-level messages.
        """
        filters = [
            ThreadMessageORM.thread_id == thread_id,
            ThreadMessageORM.reply_to_id.is_(None),
        ]
        if before is not None:
            created_at, message_id = before
            filters.append(
                or_(
                    ThreadMessageORM.created_at < created_at,
                    and_(
                        ThreadMessageORM.created_at == created_at,
                        ThreadMessageORM.id < message_id,
                    ),
                )
            )

        stmt = (
            select(ThreadMessageORM)
            .where(*filters)
            .order_by(ThreadMessageORM.created_at.desc(), ThreadMessageORM.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_replies(self, parent_ids: Sequence[UUID]) -> list[ThreadMessageORM]:
        """List direct replies to any of the given messages, oldest first.

        Args:
            parent_ids: UUIDs of the messages whose replies are wanted.

        Returns:
            Reply rows ordered by ``created_at ASC, id ASC``.
        """
        if not parent_ids:
            return []
        stmt = (
            select(ThreadMessageORM)
            .where(ThreadMessageORM.reply_to_id.in_(parent_ids))
            .order_by(ThreadMessageORM.created_at.asc(), ThreadMessageORM.id.asc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def delete_with_replies(self, message_id: UUID) -> int:
        """Delete a message and every direct reply to it.

        Replies are removed first, then the target, in the caller's
        transaction so no reply is ever visible without its parent.

        Args:
            message_id: UUID of the message to delete.

        Returns:
            Total number of rows removed.
        """
        replies_result = await self._session.execute(
            delete(ThreadMessageORM).where(ThreadMessageORM.reply_to_id == message_id)
        )
        target_result = await self._session.execute(
            delete(ThreadMessageORM).where(ThreadMessageORM.id == message_id)
        )
        removed = (replies_result.rowcount or 0) + (target_result.rowcount or 0)
        logger.debug(f"delete_with_replies: message_id={message_id}, removed={removed}")
        return removed

    async def get_authors(self, author_ids: Sequence[UUID]) -> dict[UUID, UserORM]:
        """Batch-load the users referenced as authors.

        Args:
            author_ids: UUIDs of authors to resolve.

        Returns:
            Mapping of user id to user; ids that no longer exist are absent.
        """
        unique_ids = list(set(author_ids))
        if not unique_ids:
            return {}
        stmt = select(UserORM).where(UserORM.id.in_(unique_ids))
        result = await self._session.execute(stmt)
        return {user.id: user for user in result.scalars().all()}

    async def count_for_threads(
        self, thread_ids: Sequence[UUID], user_id: UUID
    ) -> dict[UUID, tuple[int, int]]:
        """Count total and unread messages per thread for one reader.

        A message is unread when it was created after the reader's
        ``last_read_at``; a reader who never marked the thread read (or
        does not participate) has every message unread.

        Args:
            thread_ids: UUIDs of the threads to count.
            user_id: UUID of the reader.

        Returns:
            Mapping of thread id to ``(message_count, unread_count)``;
            threads without messages are absent.
        """
        if not thread_ids:
            return {}
        unread = case(
            (
                or_(
                    ThreadParticipantORM.last_read_at.is_(None),
                    ThreadMessageORM.created_at > ThreadParticipantORM.last_read_at,
                ),
                1,
            ),
            else_=0,
        )
        stmt = (
            select(
                ThreadMessageORM.thread_id,
                func.count(ThreadMessageORM.id),
                func.sum(unread),
            )
            .outerjoin(
                ThreadParticipantORM,
                and_(
                    ThreadParticipantORM.thread_id == ThreadMessageORM.thread_id,
                    ThreadParticipantORM.user_id == user_id,
                ),
            )
            .where(ThreadMessageORM.thread_id.in_(thread_ids))
            .group_by(ThreadMessageORM.thread_id)
        )
        result = await self._session.execute(stmt)
        return {
            thread_id: (int(total), int(unread_total or 0))
            for thread_id, total, unread_total in result.all()
        }
