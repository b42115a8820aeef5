"""Team-scoped RBAC permission checks."""

import logging
from typing import Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.auth.team_context import require_current_team
from teamthreads.db.models.user import TeamMembershipORM, TeamRole, UserORM
from teamthreads.errors import InsufficientPermissionError

logger = logging.getLogger(__name__)

# Role hierarchy: higher values mean more permissions
ROLE_HIERARCHY: dict[str, int] = {
    TeamRole.OWNER.value: 3,
    TeamRole.ADMIN.value: 2,
    TeamRole.MEMBER.value: 1,
}

RoleLike = Union[TeamRole, str]


def role_value(role: RoleLike) -> str:
    """Plain string form of a role."""
    return role.value if isinstance(role, TeamRole) else role


def role_rank(role: Optional[RoleLike]) -> int:
    """Return the rank of a role, 0 for unknown or missing roles."""
    if role is None:
        return 0
    return ROLE_HIERARCHY.get(role_value(role), 0)


def has_permission(membership: Optional[TeamMembershipORM], required: RoleLike) -> bool:
    """Check whether a membership meets a minimum role.

    Uses role hierarchy: higher roles inherit permissions from lower roles.
    OWNER (3) > ADMIN (2) > MEMBER (1).

    Args:
        membership: The membership to check (None never passes).
        required: Minimum role required (owner/admin/member).

    Returns:
        True if the membership's role ranks at or above ``required``.
    """
    if membership is None:
        return False
    return role_rank(membership.role) >= role_rank(required)


async def require_permission(
    session: AsyncSession,
    user: UserORM,
    required: RoleLike,
) -> TeamMembershipORM:
    """Gate a team-scoped mutation on the caller's current team role.

    Runs in mutation context: a stale current team is cleared before
    ``NoTeamSelectedError`` is raised.

    Args:
        session: Async SQLAlchemy session owned by the calling mutation.
        user: The authenticated user.
        required: Minimum role required (owner/admin/member).

    Returns:
        The caller's membership in their current team.

    Raises:
        NoTeamSelectedError: If no valid team is selected.
        InsufficientPermissionError: If the role ranks below ``required``.
    """
    membership = await require_current_team(session, user)
    required_value = role_value(required)

    if not has_permission(membership, required_value):
        logger.warning(
            f"require_permission_denied: user_id={user.id}, team_id={membership.team_id}, "
            f"user_role={role_value(membership.role)}, required_role={required_value}"
        )
        raise InsufficientPermissionError(required_value)

    logger.info(
        f"require_permission_granted: user_id={user.id}, team_id={membership.team_id}, "
        f"user_role={role_value(membership.role)}, required_role={required_value}"
    )
    return membership
