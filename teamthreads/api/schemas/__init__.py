"""API request/response schemas."""

from teamthreads.api.schemas.common import (
    ErrorResponse,
    HealthResponse,
    ServiceStatus,
    SuccessResponse,
)
from teamthreads.api.schemas.me import (
    CurrentTeamResponse,
    SetCurrentTeamRequest,
    TeamSummaryResponse,
)
from teamthreads.api.schemas.messages import (
    MessageCreatedResponse,
    MessageDeletedResponse,
    MessageEditRequest,
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

__all__ = [
    "AddParticipantRequest",
    "CurrentTeamResponse",
    "ErrorResponse",
    "HealthResponse",
    "MessageCreatedResponse",
    "MessageDeletedResponse",
    "MessageEditRequest",
    "MessagePageResponse",
    "MessageSendRequest",
    "ReplyResponse",
    "ServiceStatus",
    "SetCurrentTeamRequest",
    "SuccessResponse",
    "TeamSummaryResponse",
    "ThreadCreateRequest",
    "ThreadCreatedResponse",
    "ThreadPageResponse",
    "ThreadSummaryResponse",
    "TopLevelMessageResponse",
]
