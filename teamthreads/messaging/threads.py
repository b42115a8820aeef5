"""Thread administration: creation, listing, participants, read markers, archiving."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.auth.identity import CallerContext, get_current_user, require_user
from teamthreads.auth.permissions import require_permission
from teamthreads.auth.team_context import resolve_current_team_readonly
from teamthreads.db.base import utcnow
from teamthreads.db.models.thread import (
    ThreadORM,
    ThreadParticipantRoleEnum,
    ThreadTypeEnum,
)
from teamthreads.db.models.user import TeamRole, UserORM
from teamthreads.db.repositories.membership_repo import MembershipRepository
from teamthreads.db.repositories.message_repo import MessageRepository
from teamthreads.db.repositories.thread_repo import ThreadRepository
from teamthreads.errors import NotAuthorizedError, ParticipantExistsError, ThreadNotFoundError
from teamthreads.messaging.pagination import PaginationOptions, decode_cursor, encode_cursor
from teamthreads.messaging.participants import get_participant, is_thread_admin, require_participant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThreadSummary:
    """A team thread as listed for one reader."""

    id: UUID
    title: str
    description: Optional[str]
    thread_type: ThreadTypeEnum
    created_by: Optional[UUID]
    created_at: datetime
    last_message_at: Optional[datetime]
    message_count: int
    unread_count: int


@dataclass(frozen=True)
class ThreadPage:
    """One page of team threads."""

    page: list[ThreadSummary]
    is_done: bool
    continue_cursor: str


EMPTY_THREAD_PAGE = ThreadPage(page=[], is_done=True, continue_cursor="")


def _activity(thread: ThreadORM) -> datetime:
    return thread.last_message_at or thread.created_at


async def _load_thread(session: AsyncSession, thread_id: UUID) -> ThreadORM:
    thread = await ThreadRepository(session).get_by_id(thread_id)
    if thread is None:
        raise ThreadNotFoundError()
    return thread


async def _require_thread_admin(
    session: AsyncSession, user: UserORM, thread_id: UUID, action: str
) -> None:
    participant = await get_participant(session, user.id, thread_id)
    if not is_thread_admin(participant):
        logger.warning(
            f"thread_admin_denied: user_id={user.id}, thread_id={thread_id}, action={action}"
        )
        raise NotAuthorizedError(f"Not authorized to {action} this thread")


async def create_team_thread(
    session: AsyncSession,
    caller: CallerContext,
    title: str,
    description: Optional[str] = None,
) -> UUID:
    """Create a thread in the caller's current team.

    The creator joins as thread admin; every other team member joins as a
    regular participant.

    Args:
        session: Async SQLAlchemy session owned by the calling mutation.
        caller: Explicit caller context.
        title: Thread title.
        description: Optional thread description.

    Returns:
        UUID of the new thread.

    Raises:
        AuthenticationError: If the caller is not authenticated.
        NoTeamSelectedError: If the caller has no valid current team.
    """
    user = await require_user(session, caller)
    membership = await require_permission(session, user, TeamRole.MEMBER)

    repo = ThreadRepository(session)
    thread = await repo.create(
        team_id=membership.team_id,
        title=title,
        description=description,
        thread_type=ThreadTypeEnum.TEAM,
        created_by=user.id,
        is_archived=False,
    )

    await repo.add_participant(thread.id, user.id, ThreadParticipantRoleEnum.ADMIN)
    member_ids = await MembershipRepository(session).list_member_ids(membership.team_id)
    for member_id in member_ids:
        if member_id != user.id:
            await repo.add_participant(thread.id, member_id, ThreadParticipantRoleEnum.PARTICIPANT)

    logger.info(
        f"create_team_thread_success: user_id={user.id}, team_id={membership.team_id}, "
        f"thread_id={thread.id}, participants={len(set(member_ids) | {user.id})}"
    )
    return thread.id


async def add_thread_participant(
    session: AsyncSession,
    caller: CallerContext,
    thread_id: UUID,
    user_id: UUID,
    role: Union[ThreadParticipantRoleEnum, str] = ThreadParticipantRoleEnum.PARTICIPANT,
) -> None:
    """Add a user to a thread. Thread admins only.

    Args:
        session: Async SQLAlchemy session owned by the calling mutation.
        caller: Explicit caller context.
        thread_id: UUID of the thread.
        user_id: UUID of the user to add.
        role: Thread role for the new participant.

    Raises:
        AuthenticationError: If the caller is not authenticated.
        ThreadNotFoundError: If the thread does not exist.
        NotAuthorizedError: If the caller is not a thread admin.
        ParticipantExistsError: If the user already participates.
    """
    user = await require_user(session, caller)
    await _load_thread(session, thread_id)
    await _require_thread_admin(session, user, thread_id, "add users to")

    repo = ThreadRepository(session)
    if await repo.get_participant(thread_id, user_id) is not None:
        raise ParticipantExistsError()

    await repo.add_participant(thread_id, user_id, ThreadParticipantRoleEnum(role))
    logger.info(
        f"add_thread_participant_success: user_id={user.id}, thread_id={thread_id}, "
        f"added_user_id={user_id}, role={ThreadParticipantRoleEnum(role).value}"
    )


async def archive_thread(session: AsyncSession, caller: CallerContext, thread_id: UUID) -> None:
    """Archive a thread so it no longer accepts messages. Thread admins only.

    Raises:
        AuthenticationError: If the caller is not authenticated.
        ThreadNotFoundError: If the thread does not exist.
        NotAuthorizedError: If the caller is not a thread admin.
    """
    user = await require_user(session, caller)
    thread = await _load_thread(session, thread_id)
    await _require_thread_admin(session, user, thread_id, "archive")

    await ThreadRepository(session).update(thread, is_archived=True)
    logger.info(f"archive_thread_success: user_id={user.id}, thread_id={thread_id}")


async def mark_thread_as_read(
    session: AsyncSession, caller: CallerContext, thread_id: UUID
) -> None:
    """Record that the caller has read the thread up to now.

    Raises:
        AuthenticationError: If the caller is not authenticated.
        NotAParticipantError: If the caller does not participate in the thread.
    """
    user = await require_user(session, caller)
    participant = await require_participant(session, user, thread_id)
    participant.last_read_at = utcnow()
    await session.flush()
    logger.debug(f"mark_thread_as_read: user_id={user.id}, thread_id={thread_id}")


async def list_team_threads(
    session: AsyncSession,
    caller: CallerContext,
    options: PaginationOptions,
) -> ThreadPage:
    """List the open threads of the caller's current team, most recently active first.

    Query context: the current team is resolved read-only, and a caller who
    is anonymous or has no valid team selected gets an empty, finished page
    rather than an error. Each thread carries its message count and the
    number of messages the caller has not read yet.

    Args:
        session: Async SQLAlchemy session used for reads only.
        caller: Explicit caller context.
        options: Page size and optional resume cursor.

    Returns:
        ThreadPage with summaries, ``is_done`` and ``continue_cursor``.

    Raises:
        InvalidCursorError: If the cursor is malformed.
        ValueError: If ``num_items`` is not positive.
    """
    if options.num_items < 1:
        raise ValueError("num_items must be at least 1")

    user = await get_current_user(session, caller)
    if user is None:
        return EMPTY_THREAD_PAGE
    membership = await resolve_current_team_readonly(session, user)
    if membership is None:
        logger.debug(f"list_team_threads_empty: user_id={user.id}, reason=no_team")
        return EMPTY_THREAD_PAGE

    before = decode_cursor(options.cursor) if options.cursor else None
    rows = await ThreadRepository(session).list_team_threads(
        membership.team_id, limit=options.num_items + 1, before=before
    )
    is_done = len(rows) <= options.num_items
    threads = rows[: options.num_items]

    counts = await MessageRepository(session).count_for_threads(
        [thread.id for thread in threads], user.id
    )

    if threads:
        last = threads[-1]
        continue_cursor = encode_cursor(_activity(last), last.id)
    else:
        continue_cursor = options.cursor or ""

    page = []
    for thread in threads:
        message_count, unread_count = counts.get(thread.id, (0, 0))
        page.append(
            ThreadSummary(
                id=thread.id,
                title=thread.title,
                description=thread.description,
                thread_type=thread.thread_type,
                created_by=thread.created_by,
                created_at=thread.created_at,
                last_message_at=thread.last_message_at,
                message_count=message_count,
                unread_count=unread_count,
            )
        )

    logger.info(
        f"list_team_threads_success: user_id={user.id}, team_id={membership.team_id}, "
        f"returned={len(page)}, is_done={is_done}"
    )
    return ThreadPage(page=page, is_done=is_done, continue_cursor=continue_cursor)
