"""Thread and thread participant repository."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.db.models.thread import (
    ThreadORM,
    ThreadParticipantORM,
    ThreadParticipantRoleEnum,
)
from teamthreads.db.repositories.base import BaseRepository

THREAD_ACTIVITY = func.coalesce(ThreadORM.last_message_at, ThreadORM.created_at)


class ThreadRepository(BaseRepository[ThreadORM]):
    """Repository for thread rows and their participants.

    Args:
        session: AsyncSession for database operations.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ThreadORM)

    async def get_participant(
        self, thread_id: UUID, user_id: UUID
    ) -> Optional[ThreadParticipantORM]:
        """Look up the participant row for a (thread, user) pair.

        Args:
            thread_id: UUID of the thread.
            user_id: UUID of the user.

        Returns:
            The participant row if present, None otherwise.
        """
        stmt = select(ThreadParticipantORM).where(
            ThreadParticipantORM.thread_id == thread_id,
            ThreadParticipantORM.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_participant(
        self,
        thread_id: UUID,
        user_id: UUID,
        role: ThreadParticipantRoleEnum = ThreadParticipantRoleEnum.PARTICIPANT,
    ) -> ThreadParticipantORM:
        """Insert a participant row.

        Args:
            thread_id: UUID of the thread.
            user_id: UUID of the user joining.
            role: Thread-level role of the new participant.

        Returns:
            The new participant row.
        """
        participant = ThreadParticipantORM(thread_id=thread_id, user_id=user_id, role=role)
        self._session.add(participant)
        await self._session.flush()
        return participant

    async def list_team_threads(
        self,
        team_id: UUID,
        limit: int,
        before: Optional[tuple[datetime, UUID]] = None,
    ) -> list[ThreadORM]:
        """List a team's open threads by latest activity, newest first.

        Activity is ``last_message_at``, falling back to ``created_at`` for
        threads without messages. Ordering is ``activity DESC, id DESC``.

        Args:
            team_id: UUID of the team.
            limit: Max rows to return.
            before: Optional (activity, id) of the last row already returned.

        Returns:
            Up to ``limit`` non-archived threads.
        """
        filters = [ThreadORM.team_id == team_id, ThreadORM.is_archived.is_(False)]
        if before is not None:
            active_at, thread_id = before
            filters.append(
                or_(
                    THREAD_ACTIVITY < active_at,
                    and_(THREAD_ACTIVITY == active_at, ThreadORM.id < thread_id),
                )
            )

        stmt = (
            select(ThreadORM)
            .where(*filters)
            .order_by(THREAD_ACTIVITY.desc(), ThreadORM.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
