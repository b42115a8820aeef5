"""Thread membership guard."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.db.models.thread import ThreadParticipantORM, ThreadParticipantRoleEnum
from teamthreads.db.models.user import UserORM
from teamthreads.db.repositories.thread_repo import ThreadRepository
from teamthreads.errors import NotAParticipantError

logger = logging.getLogger(__name__)


async def get_participant(
    session: AsyncSession, user_id: UUID, thread_id: UUID
) -> Optional[ThreadParticipantORM]:
    """Return the caller's participant row for a thread, or None."""
    return await ThreadRepository(session).get_participant(thread_id, user_id)


async def require_participant(
    session: AsyncSession, user: UserORM, thread_id: UUID
) -> ThreadParticipantORM:
    """Confirm the user participates in the thread.

    Pure lookup, no writes.

    Args:
        session: Async SQLAlchemy session.
        user: The authenticated user.
        thread_id: UUID of the thread.

    Returns:
        The participant row.

    Raises:
        NotAParticipantError: If no participant row exists for (thread, user).
    """
    participant = await get_participant(session, user.id, thread_id)
    if participant is None:
        logger.warning(
            f"require_participant_denied: user_id={user.id}, thread_id={thread_id}, "
            f"reason=not_a_participant"
        )
        raise NotAParticipantError()
    return participant


def is_thread_admin(participant: Optional[ThreadParticipantORM]) -> bool:
    """True if the participant holds the thread-level admin role."""
    return participant is not None and participant.role == ThreadParticipantRoleEnum.ADMIN
