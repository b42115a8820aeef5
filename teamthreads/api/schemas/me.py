"""Current-team context schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class SetCurrentTeamRequest(BaseModel):
    """Select a team as the caller's current context.

    Args:
        team_id: ID of a team the caller belongs to
    """

    team_id: UUID


class TeamSummaryResponse(BaseModel):
    """A team as seen by one of its members.

    Args:
        team_id: Team identifier
        name: Team name
        slug: URL-safe identifier
        description: Optional team description
        owner_id: ID of the team owner
        role: Caller's role in the team ("owner", "admin", "member")
        joined_at: When the caller joined the team
    """

    team_id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    owner_id: UUID
    role: str
    joined_at: datetime


class CurrentTeamResponse(BaseModel):
    """Wrapper so that "no team selected" is a 200 with a null team."""

    team: Optional[TeamSummaryResponse] = None
