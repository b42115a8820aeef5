"""Thread administration and message history endpoints."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.api.dependencies import get_db, get_settings
from teamthreads.api.schemas.common import SuccessResponse
from teamthreads.api.schemas.messages import (
    MessageCreatedResponse,
    MessagePageResponse,
    MessageSendRequest,
    ReplyResponse,
    TopLevelMessageResponse,
)
from teamthreads.api.schemas.threads import (
    AddParticipantRequest,
    ThreadCreatedResponse,
    ThreadCreateRequest,
    ThreadPageResponse,
    ThreadSummaryResponse,
)
from teamthreads.auth.dependencies import get_caller
from teamthreads.auth.identity import CallerContext
from teamthreads.messaging.messages import send_message
from teamthreads.messaging.pagination import (
    MessagePage,
    PaginationOptions,
    list_top_level_messages,
)
from teamthreads.messaging.threads import (
    ThreadPage,
    add_thread_participant,
    archive_thread,
    create_team_thread,
    list_team_threads,
    mark_thread_as_read,
)
from teamthreads.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _page_size(num_items: Optional[int], settings: Settings) -> int:
    """Apply the configured default and clamp to the configured maximum."""
    requested = num_items if num_items is not None else settings.default_page_size
    if requested > settings.max_page_size:
        logger.debug(
            f"page_size_clamped: requested={requested}, max_page_size={settings.max_page_size}"
        )
        return settings.max_page_size
    return requested


def _threads_to_response(result: ThreadPage) -> ThreadPageResponse:
    return ThreadPageResponse(
        page=[
            ThreadSummaryResponse(
                id=thread.id,
                title=thread.title,
                description=thread.description,
                thread_type=thread.thread_type.value,
                created_by=thread.created_by,
                created_at=thread.created_at,
                last_message_at=thread.last_message_at,
                message_count=thread.message_count,
                unread_count=thread.unread_count,
            )
            for thread in result.page
        ],
        is_done=result.is_done,
        continue_cursor=result.continue_cursor,
    )


def _page_to_response(result: MessagePage) -> MessagePageResponse:
    return MessagePageResponse(
        page=[
            TopLevelMessageResponse(
                id=message.id,
                thread_id=message.thread_id,
                author_id=message.author_id,
                content=message.content,
                message_type=message.message_type.value,
                created_at=message.created_at,
                edited_at=message.edited_at,
                author_name=message.author_name,
                author_email=message.author_email,
                replies=[
                    ReplyResponse(
                        id=reply.id,
                        author_id=reply.author_id,
                        content=reply.content,
                        message_type=reply.message_type.value,
                        created_at=reply.created_at,
                        edited_at=reply.edited_at,
                        author_name=reply.author_name,
                    )
                    for reply in message.replies
                ],
            )
            for message in result.page
        ],
        is_done=result.is_done,
        continue_cursor=result.continue_cursor,
    )


@router.post(
    "/v1/threads",
    response_model=ThreadCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_thread(
    body: ThreadCreateRequest,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> ThreadCreatedResponse:
    """
    Create a thread in the caller's current team.

    Every team member is added as a participant; the creator is thread admin.

    Raises:
        AuthenticationError: 401 if the caller is anonymous
        NoTeamSelectedError: 403 if no valid team is selected
    """
    thread_id = await create_team_thread(db, caller, body.title, body.description)
    await db.commit()
    return ThreadCreatedResponse(thread_id=thread_id)


@router.get("/v1/threads", response_model=ThreadPageResponse)
async def list_threads(
    cursor: Optional[str] = Query(None, description="continue_cursor from the previous page"),
    num_items: Optional[int] = Query(None, ge=1, description="Threads per page"),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ThreadPageResponse:
    """
    List the current team's open threads, most recently active first.

    Anonymous callers and callers without a valid team selection get an
    empty page. Never writes, even when the selected team is stale.

    Args:
        cursor: Opaque cursor from the previous page (omit for the first page)
        num_items: Page size (defaults to DEFAULT_PAGE_SIZE, capped at MAX_PAGE_SIZE)
        caller: Caller context from the Authorization header
        db: Async database session from dependency
        settings: Application settings with page-size limits

    Returns:
        ThreadPageResponse with per-thread message and unread counts

    Raises:
        InvalidCursorError: 400 if the cursor is malformed
    """
    result = await list_team_threads(
        db, caller, PaginationOptions(num_items=_page_size(num_items, settings), cursor=cursor)
    )
    return _threads_to_response(result)


@router.get("/v1/threads/{thread_id}/messages", response_model=MessagePageResponse)
async def list_thread_messages(
    thread_id: UUID,
    cursor: Optional[str] = Query(None, description="continue_cursor from the previous page"),
    num_items: Optional[int] = Query(None, ge=1, description="Top-level messages per page"),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> MessagePageResponse:
    """
    List a thread's top-level messages newest first, each with its replies.

    Args:
        thread_id: UUID of the thread
        cursor: Opaque cursor from the previous page (omit for the first page)
        num_items: Page size (defaults to DEFAULT_PAGE_SIZE, capped at MAX_PAGE_SIZE)
        caller: Caller context from the Authorization header
        db: Async database session from dependency
        settings: Application settings with page-size limits

    Returns:
        MessagePageResponse with page, is_done and continue_cursor

    Raises:
        AuthenticationError: 401 if the caller is anonymous
        NotAParticipantError: 403 if the caller does not participate
        InvalidCursorError: 400 if the cursor is malformed
    """
    result = await list_top_level_messages(
        db,
        caller,
        thread_id,
        PaginationOptions(num_items=_page_size(num_items, settings), cursor=cursor),
    )
    return _page_to_response(result)


@router.post(
    "/v1/threads/{thread_id}/messages",
    response_model=MessageCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_thread_message(
    thread_id: UUID,
    body: MessageSendRequest,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> MessageCreatedResponse:
    """
    Post a text message, optionally as a reply to another message in the thread.

    Raises:
        AuthenticationError: 401 if the caller is anonymous
        NotAParticipantError: 403 if the caller does not participate
        ThreadNotFoundError: 404 if the thread does not exist
        ThreadArchivedError: 409 if the thread is archived
        InvalidReplyTargetError: 409 if the reply target is not in this thread
    """
    message_id = await send_message(db, caller, thread_id, body.content, body.reply_to_id)
    await db.commit()
    return MessageCreatedResponse(message_id=message_id)


@router.post("/v1/threads/{thread_id}/read", response_model=SuccessResponse)
async def mark_read(
    thread_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """Record that the caller has read the thread up to now."""
    await mark_thread_as_read(db, caller, thread_id)
    await db.commit()
    return SuccessResponse(message="Thread marked as read")


@router.post(
    "/v1/threads/{thread_id}/participants",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_participant(
    thread_id: UUID,
    body: AddParticipantRequest,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """
    Add a user to a thread (thread admins only).

    Raises:
        NotAuthorizedError: 403 if the caller is not a thread admin
        ParticipantExistsError: 409 if the user already participates
    """
    await add_thread_participant(db, caller, thread_id, body.user_id, body.role)
    await db.commit()
    return SuccessResponse(message="Participant added", data={"user_id": str(body.user_id)})


@router.post("/v1/threads/{thread_id}/archive", response_model=SuccessResponse)
async def archive(
    thread_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """Archive a thread so it no longer accepts messages (thread admins only)."""
    await archive_thread(db, caller, thread_id)
    await db.commit()
    logger.info(f"archive_endpoint_success: thread_id={thread_id}")
    return SuccessResponse(message="Thread archived")
