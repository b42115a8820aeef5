"""Thread administration schemas."""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ThreadCreateRequest(BaseModel):
    """Create a thread in the caller's current team.

    Args:
        title: Thread title (1-200 characters)
        description: Optional thread description
    """

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)


class ThreadCreatedResponse(BaseModel):
    """Identifier of a newly created thread."""

    thread_id: UUID


class AddParticipantRequest(BaseModel):
    """Add a user to a thread.

    Args:
        user_id: ID of the user to add
        role: Thread role ("participant" or "admin")
    """

    user_id: UUID
    role: Literal["participant", "admin"] = "participant"


class ThreadSummaryResponse(BaseModel):
    """A team thread with message and unread counts for the caller."""

    id: UUID
    title: str
    description: Optional[str] = None
    thread_type: str
    created_by: Optional[UUID] = None
    created_at: datetime
    last_message_at: Optional[datetime] = None
    message_count: int
    unread_count: int


class ThreadPageResponse(BaseModel):
    """One page of team threads, most recently active first.

    Args:
        page: Threads in this page
        is_done: True when no further pages exist
        continue_cursor: Opaque cursor for the next page
    """

    page: list[ThreadSummaryResponse]
    is_done: bool
    continue_cursor: str
