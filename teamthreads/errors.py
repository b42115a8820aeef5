"""Error taxonomy for authorization and threaded messaging.

Every error carries a stable ``code`` (used as the ``error`` field of the API
``ErrorResponse``) and an ``http_status`` used by the error-handling
middleware. Nothing here is retried by the core; callers decide.

Families:

- ``AuthenticationError``: no verified caller.
- ``AuthorizationError``: caller is known but lacks context or rights.
- ``NotFoundError``: a referenced record does not exist.
- ``StateConflictError``: a precondition on existing state is violated.
"""

from typing import Optional


class TeamThreadsError(Exception):
    """Base class for all domain errors."""

    code: str = "error"
    http_status: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, details: Optional[dict] = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class AuthenticationError(TeamThreadsError):
    code = "not_authenticated"
    http_status = 401
    default_message = "Not authenticated"


class AuthorizationError(TeamThreadsError):
    code = "forbidden"
    http_status = 403
    default_message = "Not authorized"


class NoTeamSelectedError(AuthorizationError):
    code = "no_team_selected"
    default_message = "No team selected. Please select a team first."


class NotAMemberError(AuthorizationError):
    code = "not_a_member"
    default_message = "You are not a member of this team"


class InsufficientPermissionError(AuthorizationError):
    code = "insufficient_permission"

    def __init__(self, required: str) -> None:
        self.required = required
        super().__init__(
            f"Insufficient permissions. {required} role required.",
            details={"required": required},
        )


class NotAParticipantError(AuthorizationError):
    code = "not_a_participant"
    default_message = "Not a participant in this thread"


class NotAuthorError(AuthorizationError):
    code = "not_author"
    default_message = "Not authorized to edit this message"


class NotAuthorizedError(AuthorizationError):
    code = "not_authorized"
    default_message = "Not authorized to perform this action"


class NotFoundError(TeamThreadsError):
    code = "not_found"
    http_status = 404
    default_message = "Resource not found"


class TeamNotFoundError(NotFoundError):
    code = "team_not_found"
    default_message = "Team not found"


class ThreadNotFoundError(NotFoundError):
    code = "thread_not_found"
    default_message = "Thread not found"


class MessageNotFoundError(NotFoundError):
    code = "message_not_found"
    default_message = "Message not found"


class StateConflictError(TeamThreadsError):
    code = "state_conflict"
    http_status = 409
    default_message = "Request conflicts with the current state"


class ThreadArchivedError(StateConflictError):
    code = "thread_archived"
    default_message = "Cannot send messages to archived thread"


class NotEditableError(StateConflictError):
    code = "not_editable"
    default_message = "Cannot edit system or AI messages"


class InvalidReplyTargetError(StateConflictError):
    code = "invalid_reply_target"
    default_message = "Invalid reply target"


class ParticipantExistsError(StateConflictError):
    code = "participant_exists"
    default_message = "User is already a participant in this thread"


class InvalidCursorError(TeamThreadsError):
    code = "invalid_cursor"
    http_status = 400
    default_message = "Malformed pagination cursor"
