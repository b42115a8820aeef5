"""Cursor pagination over a thread's top-level messages.

Pages are ordered newest first by ``(created_at, id)``. The cursor is an
opaque URL-safe token holding the keyset position of the last row handed
out, so resuming with the same page size yields the next disjoint slice.
Messages inserted after the first page sort ahead of every issued cursor
and therefore never cause duplicates or gaps in later pages.

Each top-level message carries all of its direct replies, oldest first.
Replies are not paginated separately.
"""

import base64
import binascii
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.auth.identity import CallerContext, require_user
from teamthreads.db.models.thread import MessageTypeEnum, ThreadMessageORM
from teamthreads.db.repositories.message_repo import MessageRepository
from teamthreads.errors import InvalidCursorError
from teamthreads.messaging.display import author_display_name
from teamthreads.messaging.participants import require_participant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaginationOptions:
    """Page request: size plus the cursor returned by the previous page."""

    num_items: int
    cursor: Optional[str] = None


@dataclass(frozen=True)
class Reply:
    """A direct reply to a top-level message."""

    id: UUID
    author_id: Optional[UUID]
    content: str
    message_type: MessageTypeEnum
    created_at: datetime
    edited_at: Optional[datetime]
    author_name: str


@dataclass(frozen=True)
class TopLevelMessage:
    """A message with no reply target, plus its replies oldest first."""

    id: UUID
    thread_id: UUID
    author_id: Optional[UUID]
    content: str
    message_type: MessageTypeEnum
    created_at: datetime
    edited_at: Optional[datetime]
    author_name: str
    author_email: Optional[str]
    replies: list[Reply] = field(default_factory=list)


@dataclass(frozen=True)
class MessagePage:
    """One page of top-level messages."""

    page: list[TopLevelMessage]
    is_done: bool
    continue_cursor: str


def encode_cursor(created_at: datetime, message_id: UUID) -> str:
    """Encode a keyset position as an opaque cursor token."""
    raw = json.dumps({"t": created_at.isoformat(), "id": str(message_id)}, separators=(",", ":"))
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(cursor: str) -> tuple[datetime, UUID]:
    """Decode a cursor token back into a keyset position.

    Raises:
        InvalidCursorError: If the token was not produced by ``encode_cursor``.
    """
    try:
        padded = cursor + "=" * (-len(cursor) % 4)
        data = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
        return datetime.fromisoformat(data["t"]), UUID(data["id"])
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError) as e:
        logger.warning(f"decode_cursor_error: error={str(e)}")
        raise InvalidCursorError() from e


def _build_page(
    top_level: list[ThreadMessageORM],
    replies: list[ThreadMessageORM],
    authors: dict,
) -> list[TopLevelMessage]:
    replies_by_parent: dict[UUID, list[Reply]] = {}
    for reply in replies:
        author = authors.get(reply.author_id) if reply.author_id else None
        replies_by_parent.setdefault(reply.reply_to_id, []).append(
            Reply(
                id=reply.id,
                author_id=reply.author_id,
                content=reply.content,
                message_type=reply.message_type,
                created_at=reply.created_at,
                edited_at=reply.edited_at,
                author_name=author_display_name(reply.message_type, author),
            )
        )

    page: list[TopLevelMessage] = []
    for message in top_level:
        author = authors.get(message.author_id) if message.author_id else None
        page.append(
            TopLevelMessage(
                id=message.id,
                thread_id=message.thread_id,
                author_id=message.author_id,
                content=message.content,
                message_type=message.message_type,
                created_at=message.created_at,
                edited_at=message.edited_at,
                author_name=author_display_name(message.message_type, author),
                author_email=author.email if author is not None else None,
                replies=replies_by_parent.get(message.id, []),
            )
        )
    return page


async def list_top_level_messages(
    session: AsyncSession,
    caller: CallerContext,
    thread_id: UUID,
    options: PaginationOptions,
) -> MessagePage:
    """Return one page of a thread's top-level messages with their replies.

    Args:
        session: Async SQLAlchemy session used for reads only.
        caller: Explicit caller context.
        thread_id: UUID of the thread.
        options: Page size and optional resume cursor.

    Returns:
        MessagePage with enriched messages, ``is_done`` and ``continue_cursor``.

    Raises:
        AuthenticationError: If the caller is not authenticated.
        NotAParticipantError: If the caller does not participate in the thread.
        InvalidCursorError: If the cursor is malformed.
        ValueError: If ``num_items`` is not positive.
    """
    if options.num_items < 1:
        raise ValueError("num_items must be at least 1")

    user = await require_user(session, caller)
    await require_participant(session, user, thread_id)

    before = decode_cursor(options.cursor) if options.cursor else None

    repo = MessageRepository(session)
    rows = await repo.list_top_level(thread_id, limit=options.num_items + 1, before=before)
    is_done = len(rows) <= options.num_items
    top_level = rows[: options.num_items]

    replies = await repo.list_replies([message.id for message in top_level])
    author_ids = [m.author_id for m in (*top_level, *replies) if m.author_id is not None]
    authors = await repo.get_authors(author_ids)

    if top_level:
        last = top_level[-1]
        continue_cursor = encode_cursor(last.created_at, last.id)
    else:
        continue_cursor = options.cursor or ""

    logger.info(
        f"list_top_level_messages_success: user_id={user.id}, thread_id={thread_id}, "
        f"returned={len(top_level)}, replies={len(replies)}, is_done={is_done}"
    )

    return MessagePage(
        page=_build_page(top_level, replies, authors),
        is_done=is_done,
        continue_cursor=continue_cursor,
    )
