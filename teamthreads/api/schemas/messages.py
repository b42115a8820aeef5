"""Threaded message schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class MessageSendRequest(BaseModel):
    """Post a message to a thread.

    Args:
        content: Message text (non-empty)
        reply_to_id: Optional ID of a message in the same thread to reply to
    """

    content: str = Field(..., min_length=1, max_length=10000)
    reply_to_id: Optional[UUID] = None


class MessageEditRequest(BaseModel):
    """Replace the content of one of the caller's own messages.

    Args:
        content: New message text (non-empty)
    """

    content: str = Field(..., min_length=1, max_length=10000)


class MessageCreatedResponse(BaseModel):
    """Identifier of a newly posted message."""

    message_id: UUID


class MessageDeletedResponse(BaseModel):
    """Result of deleting a message.

    Args:
        deleted: Number of rows removed (the message plus its direct replies)
    """

    deleted: int


class ReplyResponse(BaseModel):
    """A direct reply nested under a top-level message.

    Args:
        id: Message identifier
        author_id: Author ID (None for system or AI messages)
        content: Message text
        message_type: "text", "system" or "ai"
        created_at: Creation timestamp
        edited_at: Timestamp of the last edit, if any
        author_name: Resolved display name
    """

    id: UUID
    author_id: Optional[UUID] = None
    content: str
    message_type: str
    created_at: datetime
    edited_at: Optional[datetime] = None
    author_name: str


class TopLevelMessageResponse(BaseModel):
    """A top-level message with its replies, oldest reply first.

    Args:
        id: Message identifier
        thread_id: Parent thread ID
        author_id: Author ID (None for system or AI messages)
        content: Message text
        message_type: "text", "system" or "ai"
        created_at: Creation timestamp
        edited_at: Timestamp of the last edit, if any
        author_name: Resolved display name
        author_email: Author email when there is a human author
        replies: Direct replies in ascending creation order
    """

    id: UUID
    thread_id: UUID
    author_id: Optional[UUID] = None
    content: str
    message_type: str
    created_at: datetime
    edited_at: Optional[datetime] = None
    author_name: str
    author_email: Optional[str] = None
    replies: list[ReplyResponse] = Field(default_factory=list)


class MessagePageResponse(BaseModel):
    """One page of a thread's top-level messages, newest first.

    Args:
        page: Messages on this page
        is_done: True when no older top-level messages remain
        continue_cursor: Opaque cursor for the next page
    """

    page: list[TopLevelMessageResponse]
    is_done: bool
    continue_cursor: str
