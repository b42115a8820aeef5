"""Threaded message store: send, edit, delete, and system messages.

Messages form a flat table with an optional ``reply_to_id`` back-pointer.
Every user-facing operation re-derives the caller from the explicit
``CallerContext`` and checks thread participation before touching state.
All functions flush but never commit; the caller's transaction decides.
"""

import logging
from typing import Optional, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.auth.identity import CallerContext, require_user
from teamthreads.db.base import utcnow
from teamthreads.db.models.thread import MessageTypeEnum, ThreadMessageORM, ThreadORM
from teamthreads.db.repositories.message_repo import MessageRepository
from teamthreads.db.repositories.thread_repo import ThreadRepository
from teamthreads.errors import (
    InvalidReplyTargetError,
    MessageNotFoundError,
    NotAuthorError,
    NotAuthorizedError,
    NotEditableError,
    ThreadArchivedError,
    ThreadNotFoundError,
)
from teamthreads.messaging.participants import get_participant, is_thread_admin, require_participant

logger = logging.getLogger(__name__)

SYSTEM_MESSAGE_TYPES = frozenset({MessageTypeEnum.SYSTEM, MessageTypeEnum.AI})


async def _insert_message(
    session: AsyncSession,
    thread: ThreadORM,
    content: str,
    message_type: MessageTypeEnum,
    author_id: Optional[UUID] = None,
    reply_to_id: Optional[UUID] = None,
) -> ThreadMessageORM:
    now = utcnow()
    message = await MessageRepository(session).create(
        thread_id=thread.id,
        author_id=author_id,
        content=content,
        message_type=message_type,
        reply_to_id=reply_to_id,
        created_at=now,
    )
    thread.last_message_at = now
    await session.flush()
    return message


async def send_message(
    session: AsyncSession,
    caller: CallerContext,
    thread_id: UUID,
    content: str,
    reply_to_id: Optional[UUID] = None,
) -> UUID:
    """Post a text message (optionally a reply) to a thread.

    Not idempotent: a retried call creates a second message.

    Args:
        session: Async SQLAlchemy session owned by the calling mutation.
        caller: Explicit caller context.
        thread_id: UUID of the target thread.
        content: Message body.
        reply_to_id: Optional UUID of the message being replied to.

    Returns:
        UUID of the new message.

    Raises:
        AuthenticationError: If the caller is not authenticated.
        NotAParticipantError: If the caller does not participate in the thread.
        ThreadNotFoundError: If the thread does not exist.
        ThreadArchivedError: If the thread is archived.
        InvalidReplyTargetError: If the reply target is missing or in another thread.
    """
    user = await require_user(session, caller)
    await require_participant(session, user, thread_id)

    thread = await ThreadRepository(session).get_by_id(thread_id)
    if thread is None:
        raise ThreadNotFoundError()
    if thread.is_archived:
        logger.warning(
            f"send_message_error: user_id={user.id}, thread_id={thread_id}, reason=archived"
        )
        raise ThreadArchivedError()

    if reply_to_id is not None:
        target = await MessageRepository(session).get_by_id(reply_to_id)
        if target is None or target.thread_id != thread_id:
            logger.warning(
                f"send_message_error: user_id={user.id}, thread_id={thread_id}, "
                f"reply_to_id={reply_to_id}, reason=invalid_reply_target"
            )
            raise InvalidReplyTargetError()

    message = await _insert_message(
        session,
        thread,
        content,
        MessageTypeEnum.TEXT,
        author_id=user.id,
        reply_to_id=reply_to_id,
    )

    logger.info(
        f"send_message_success: user_id={user.id}, thread_id={thread_id}, "
        f"message_id={message.id}, reply_to_id={reply_to_id}"
    )
    return message.id


async def edit_message(
    session: AsyncSession,
    caller: CallerContext,
    message_id: UUID,
    content: str,
) -> None:
    """Replace the content of the caller's own text message.

    Args:
        session: Async SQLAlchemy session owned by the calling mutation.
        caller: Explicit caller context.
        message_id: UUID of the message to edit.
        content: New message body.

    Raises:
        AuthenticationError: If the caller is not authenticated.
        MessageNotFoundError: If the message does not exist.
        NotEditableError: If the message is not a text message.
        NotAuthorError: If the caller did not write the message.
    """
    user = await require_user(session, caller)

    repo = MessageRepository(session)
    message = await repo.get_by_id(message_id)
    if message is None:
        raise MessageNotFoundError()

    # System and AI messages are frozen for every caller, author or not
    if message.message_type != MessageTypeEnum.TEXT:
        logger.warning(
            f"edit_message_denied: user_id={user.id}, message_id={message_id}, "
            f"reason=not_editable, message_type={message.message_type.value}"
        )
        raise NotEditableError()

    if message.author_id != user.id:
        logger.warning(
            f"edit_message_denied: user_id={user.id}, message_id={message_id}, reason=not_author"
        )
        raise NotAuthorError()

    await repo.update(message, content=content, edited_at=utcnow())
    logger.info(f"edit_message_success: user_id={user.id}, message_id={message_id}")


async def delete_message(
    session: AsyncSession,
    caller: CallerContext,
    message_id: UUID,
) -> int:
    """Hard-delete a message and all of its direct replies.

    Allowed for the author and for thread admins. Replies are removed
    first, in the same transaction as the target.

    Args:
        session: Async SQLAlchemy session owned by the calling mutation.
        caller: Explicit caller context.
        message_id: UUID of the message to delete.

    Returns:
        Number of rows removed (the message plus its replies).

    Raises:
        AuthenticationError: If the caller is not authenticated.
        MessageNotFoundError: If the message does not exist.
        NotAuthorizedError: If the caller is neither author nor thread admin.
    """
    user = await require_user(session, caller)

    repo = MessageRepository(session)
    message = await repo.get_by_id(message_id)
    if message is None:
        raise MessageNotFoundError()

    is_author = message.author_id is not None and message.author_id == user.id
    if not is_author:
        participant = await get_participant(session, user.id, message.thread_id)
        if not is_thread_admin(participant):
            logger.warning(
                f"delete_message_denied: user_id={user.id}, message_id={message_id}, "
                f"thread_id={message.thread_id}, reason=not_author_or_admin"
            )
            raise NotAuthorizedError("Not authorized to delete this message")

    removed = await repo.delete_with_replies(message_id)
    logger.info(
        f"delete_message_success: user_id={user.id}, message_id={message_id}, "
        f"as_author={is_author}, rows_removed={removed}"
    )
    return removed


async def send_system_message(
    session: AsyncSession,
    thread_id: UUID,
    content: str,
    kind: Union[MessageTypeEnum, str] = MessageTypeEnum.SYSTEM,
) -> UUID:
    """Post an authorless system or AI message.

    Trusted internal callers only: no caller identity is checked.

    Args:
        session: Async SQLAlchemy session owned by the calling mutation.
        thread_id: UUID of the target thread.
        content: Message body.
        kind: ``system`` or ``ai``.

    Returns:
        UUID of the new message.

    Raises:
        ValueError: If ``kind`` is not system or ai.
        ThreadNotFoundError: If the thread does not exist.
    """
    message_type = MessageTypeEnum(kind)
    if message_type not in SYSTEM_MESSAGE_TYPES:
        raise ValueError(f"System messages must be 'system' or 'ai', got '{message_type.value}'")

    thread = await ThreadRepository(session).get_by_id(thread_id)
    if thread is None:
        raise ThreadNotFoundError()

    message = await _insert_message(session, thread, content, message_type)
    logger.info(
        f"send_system_message_success: thread_id={thread_id}, message_id={message.id}, "
        f"kind={message_type.value}"
    )
    return message.id
