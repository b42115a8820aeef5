"""Current-team context resolution.

``UserORM.current_team_id`` is a cached pointer into team_membership and is
never trusted on its own: every resolution re-checks the membership row.

Two resolvers exist on purpose. ``resolve_current_team`` runs in mutation
context and clears a stale pointer (self-heal). ``resolve_current_team_readonly``
runs in query context and only reports the stale pointer as None, leaving the
user record untouched.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.db.models.user import TeamMembershipORM, TeamORM, TeamRole, UserORM
from teamthreads.db.repositories.membership_repo import MembershipRepository
from teamthreads.errors import NoTeamSelectedError, NotAMemberError, TeamNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeamSummary:
    """A team as seen by one of its members."""

    team_id: UUID
    name: str
    slug: str
    description: Optional[str]
    owner_id: UUID
    role: TeamRole
    joined_at: datetime


async def _lookup_membership(
    session: AsyncSession, user: UserORM
) -> Optional[TeamMembershipORM]:
    if user.current_team_id is None:
        return None
    return await MembershipRepository(session).get_membership(user.current_team_id, user.id)


async def resolve_current_team(
    session: AsyncSession, user: UserORM
) -> Optional[TeamMembershipORM]:
    """Resolve the caller's selected team membership (mutation context).

    If the pointer refers to a team the user no longer belongs to, the
    pointer is cleared in the current transaction.

    Args:
        session: Async SQLAlchemy session owned by the calling mutation.
        user: The authenticated user.

    Returns:
        The membership backing ``current_team_id``, or None.
    """
    membership = await _lookup_membership(session, user)
    if membership is None and user.current_team_id is not None:
        logger.warning(
            f"current_team_stale: user_id={user.id}, team_id={user.current_team_id}, "
            f"action=cleared"
        )
        user.current_team_id = None
        await session.flush()
    return membership


async def resolve_current_team_readonly(
    session: AsyncSession, user: UserORM
) -> Optional[TeamMembershipORM]:
    """Resolve the caller's selected team membership (query context).

    Never writes. A stale pointer is reported as None and left in place
    for the next mutation to heal.

    Args:
        session: Async SQLAlchemy session used for reads only.
        user: The authenticated user.

    Returns:
        The membership backing ``current_team_id``, or None.
    """
    membership = await _lookup_membership(session, user)
    if membership is None and user.current_team_id is not None:
        logger.info(
            f"current_team_stale: user_id={user.id}, team_id={user.current_team_id}, "
            f"action=none_read_only"
        )
    return membership


async def require_current_team(session: AsyncSession, user: UserORM) -> TeamMembershipORM:
    """Resolve the selected team membership or raise (mutation context).

    Args:
        session: Async SQLAlchemy session owned by the calling mutation.
        user: The authenticated user.

    Returns:
        The membership backing ``current_team_id``.

    Raises:
        NoTeamSelectedError: If no team is selected or the selection was stale.
    """
    membership = await resolve_current_team(session, user)
    if membership is None:
        logger.warning(f"require_current_team_denied: user_id={user.id}, reason=no_team_selected")
        raise NoTeamSelectedError()
    return membership


async def set_current_team(session: AsyncSession, user: UserORM, team_id: UUID) -> None:
    """Select a team as the user's current context.

    Writes only when the pointer actually changes.

    Args:
        session: Async SQLAlchemy session owned by the calling mutation.
        user: The authenticated user.
        team_id: UUID of the team to select.

    Raises:
        TeamNotFoundError: If the team does not exist.
        NotAMemberError: If the user has no membership in the team.
    """
    team = await session.get(TeamORM, team_id)
    if team is None:
        logger.warning(
            f"set_current_team_error: user_id={user.id}, team_id={team_id}, "
            f"reason=team_not_found"
        )
        raise TeamNotFoundError()

    membership = await MembershipRepository(session).get_membership(team_id, user.id)
    if membership is None:
        logger.warning(
            f"set_current_team_error: user_id={user.id}, team_id={team_id}, reason=not_a_member"
        )
        raise NotAMemberError()

    if user.current_team_id == team_id:
        logger.debug(f"set_current_team_unchanged: user_id={user.id}, team_id={team_id}")
        return

    user.current_team_id = team_id
    await session.flush()
    logger.info(
        f"set_current_team_success: user_id={user.id}, team_id={team_id}, role={membership.role}"
    )


async def clear_current_team(session: AsyncSession, user: UserORM) -> None:
    """Unconditionally clear the user's current team pointer.

    Args:
        session: Async SQLAlchemy session owned by the calling mutation.
        user: The authenticated user.
    """
    user.current_team_id = None
    await session.flush()
    logger.info(f"clear_current_team_success: user_id={user.id}")


async def get_current_team_details(
    session: AsyncSession, user: UserORM
) -> Optional[TeamSummary]:
    """Return the selected team with the caller's role (query context).

    Args:
        session: Async SQLAlchemy session used for reads only.
        user: The authenticated user.

    Returns:
        TeamSummary, or None when nothing valid is selected.
    """
    membership = await resolve_current_team_readonly(session, user)
    if membership is None:
        return None

    team = await session.get(TeamORM, membership.team_id)
    if team is None:
        return None

    return TeamSummary(
        team_id=team.id,
        name=team.name,
        slug=team.slug,
        description=team.description,
        owner_id=team.owner_id,
        role=membership.role,
        joined_at=membership.joined_at,
    )


async def list_user_teams(session: AsyncSession, user: UserORM) -> list[TeamSummary]:
    """List every team the user belongs to with their role in each.

    Args:
        session: Async SQLAlchemy session used for reads only.
        user: The authenticated user.

    Returns:
        TeamSummary per membership, oldest membership first.
    """
    rows = await MembershipRepository(session).list_for_user(user.id)
    return [
        TeamSummary(
            team_id=team.id,
            name=team.name,
            slug=team.slug,
            description=team.description,
            owner_id=team.owner_id,
            role=membership.role,
            joined_at=membership.joined_at,
        )
        for membership, team in rows
    ]
