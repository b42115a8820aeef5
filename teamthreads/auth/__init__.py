"""Authentication, team context, and authorization utilities."""

from teamthreads.auth.identity import (
    ANONYMOUS,
    CallerContext,
    get_current_user,
    require_user,
)
from teamthreads.auth.jwt import TokenPayload, create_access_token, decode_token
from teamthreads.auth.permissions import (
    ROLE_HIERARCHY,
    has_permission,
    require_permission,
    role_rank,
)
from teamthreads.auth.team_context import (
    TeamSummary,
    clear_current_team,
    get_current_team_details,
    list_user_teams,
    require_current_team,
    resolve_current_team,
    resolve_current_team_readonly,
    set_current_team,
)

__all__ = [
    "ANONYMOUS",
    "CallerContext",
    "ROLE_HIERARCHY",
    "TeamSummary",
    "TokenPayload",
    "clear_current_team",
    "create_access_token",
    "decode_token",
    "get_current_team_details",
    "get_current_user",
    "has_permission",
    "list_user_teams",
    "require_current_team",
    "require_permission",
    "require_user",
    "resolve_current_team",
    "resolve_current_team_readonly",
    "role_rank",
    "set_current_team",
]
