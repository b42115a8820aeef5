"""Team membership repository with (team, user) indexed lookups."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.db.models.user import TeamMembershipORM, TeamORM
from teamthreads.db.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class MembershipRepository(BaseRepository[TeamMembershipORM]):
    """Repository for team_membership rows.

    Args:
        session: AsyncSession for database operations.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TeamMembershipORM)

    async def get_membership(self, team_id: UUID, user_id: UUID) -> Optional[TeamMembershipORM]:
        """Look up the membership for a (team, user) pair.

        Args:
            team_id: UUID of the team.
            user_id: UUID of the user.

        Returns:
            The membership if the user belongs to the team, None otherwise.
        """
        stmt = select(TeamMembershipORM).where(
            TeamMembershipORM.team_id == team_id,
            TeamMembershipORM.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: UUID) -> list[tuple[TeamMembershipORM, TeamORM]]:
        """List every membership of a user together with its team.

        Args:
            user_id: UUID of the user.

        Returns:
            (membership, team) pairs ordered by join time, oldest first.
        """
        stmt = (
            select(TeamMembershipORM, TeamORM)
            .join(TeamORM, TeamORM.id == TeamMembershipORM.team_id)
            .where(TeamMembershipORM.user_id == user_id)
            .order_by(TeamMembershipORM.joined_at.asc())
        )
        result = await self._session.execute(stmt)
        rows = [(row[0], row[1]) for row in result.all()]
        logger.debug(f"list_memberships_for_user: user_id={user_id}, count={len(rows)}")
        return rows

    async def list_member_ids(self, team_id: UUID) -> list[UUID]:
        """List the user ids of every member of a team.

        Args:
            team_id: UUID of the team.

        Returns:
            User UUIDs of all members.
        """
        stmt = select(TeamMembershipORM.user_id).where(TeamMembershipORM.team_id == team_id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
