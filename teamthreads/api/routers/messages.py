"""Single-message endpoints: edit and delete."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.api.dependencies import get_db
from teamthreads.api.schemas.common import SuccessResponse
from teamthreads.api.schemas.messages import MessageDeletedResponse, MessageEditRequest
from teamthreads.auth.dependencies import get_caller
from teamthreads.auth.identity import CallerContext
from teamthreads.messaging.messages import delete_message, edit_message

logger = logging.getLogger(__name__)

router = APIRouter()


@router.patch("/v1/messages/{message_id}", response_model=SuccessResponse)
async def edit(
    message_id: UUID,
    body: MessageEditRequest,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """
    Replace the content of one of the caller's own text messages.

    Raises:
        MessageNotFoundError: 404 if the message does not exist
        NotAuthorError: 403 if the caller did not write the message
        NotEditableError: 409 for system and AI messages
    """
    await edit_message(db, caller, message_id, body.content)
    await db.commit()
    return SuccessResponse(message="Message updated")


@router.delete("/v1/messages/{message_id}", response_model=MessageDeletedResponse)
async def delete(
    message_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> MessageDeletedResponse:
    """
    Delete a message and its direct replies (author or thread admin).

    Raises:
        MessageNotFoundError: 404 if the message does not exist
        NotAuthorizedError: 403 if the caller is neither author nor thread admin
    """
    deleted = await delete_message(db, caller, message_id)
    await db.commit()
    logger.info(f"delete_endpoint_success: message_id={message_id}, deleted={deleted}")
    return MessageDeletedResponse(deleted=deleted)
