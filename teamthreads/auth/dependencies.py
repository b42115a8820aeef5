"""FastAPI dependencies for caller identity and team-role gates."""

import logging
from typing import Callable, Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.api.dependencies import get_db, get_settings
from teamthreads.auth.identity import ANONYMOUS, CallerContext, require_user
from teamthreads.auth.jwt import TokenPayload, decode_token
from teamthreads.auth.permissions import RoleLike, require_permission, role_value
from teamthreads.db.models.user import TeamMembershipORM
from teamthreads.errors import AuthenticationError
from teamthreads.settings import Settings

logger = logging.getLogger(__name__)


async def get_caller(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> CallerContext:
    """
    Build the explicit caller context from the Authorization header.

    - No header: anonymous caller (read paths return nothing, write paths fail)
    - "Bearer <jwt>": verified caller with the token's user id

    Only token verification happens here; the user record is loaded by the
    operation itself so that it always reflects the current database state.

    Args:
        authorization: Authorization header value (optional)
        settings: Application settings with JWT configuration

    Returns:
        CallerContext for the request.

    Raises:
        AuthenticationError: If the header is malformed or the token is invalid or expired.
    """
    if not authorization:
        return ANONYMOUS

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.warning("get_caller_error: reason=malformed_authorization_header")
        raise AuthenticationError("Malformed Authorization header (use 'Bearer <token>')")

    try:
        payload: TokenPayload = decode_token(parts[1], settings=settings)
    except ValueError as e:
        logger.warning(f"get_caller_error: reason=jwt_decode_failed, error={str(e)}")
        raise AuthenticationError(str(e)) from e

    if payload.token_type != "access":
        logger.warning(f"get_caller_error: reason=invalid_token_type, type={payload.token_type}")
        raise AuthenticationError("Invalid token type")

    logger.debug(f"get_caller_success: user_id={payload.sub}")
    return CallerContext(user_id=payload.sub)


def require_team_role(required: RoleLike) -> Callable:
    """
    Factory that creates a FastAPI dependency requiring a team role level.

    The gate used by every team-scoped mutation (team settings, invitations,
    branding). Resolves the caller's current team in mutation context, so a
    stale selection is cleared; the route is expected to commit.

    Args:
        required: Minimum role required (owner/admin/member)

    Returns:
        FastAPI dependency function returning the caller's TeamMembershipORM

    Example:
        >>> @router.patch("/v1/team/settings")
        >>> async def update_settings(
        >>>     membership: TeamMembershipORM = Depends(require_team_role("admin")),
        >>> ):
        >>>     ...
    """

    async def role_checker(
        caller: CallerContext = Depends(get_caller),
        db: AsyncSession = Depends(get_db),
    ) -> TeamMembershipORM:
        """Check the caller's role in their current team."""
        user = await require_user(db, caller)
        return await require_permission(db, user, required)

    role_checker.__name__ = f"require_team_role_{role_value(required)}"
    return role_checker
