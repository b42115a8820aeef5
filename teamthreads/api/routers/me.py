"""Current-team context endpoints for the calling user."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.api.dependencies import get_db
from teamthreads.api.schemas.common import SuccessResponse
from teamthreads.api.schemas.me import (
    CurrentTeamResponse,
    SetCurrentTeamRequest,
    TeamSummaryResponse,
)
from teamthreads.auth.dependencies import get_caller
from teamthreads.auth.identity import CallerContext, get_current_user, require_user
from teamthreads.auth.team_context import (
    TeamSummary,
    clear_current_team,
    get_current_team_details,
    list_user_teams,
    set_current_team,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(summary: TeamSummary) -> TeamSummaryResponse:
    return TeamSummaryResponse(
        team_id=summary.team_id,
        name=summary.name,
        slug=summary.slug,
        description=summary.description,
        owner_id=summary.owner_id,
        role=summary.role.value,
        joined_at=summary.joined_at,
    )


@router.get("/v1/me/team", response_model=CurrentTeamResponse)
async def get_my_team(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> CurrentTeamResponse:
    """
    Get the caller's currently selected team and their role in it.

    Read-only: a stale selection is reported as no team and left in place.
    Anonymous callers get no team.

    Args:
        caller: Caller context from the Authorization header
        db: Async database session from dependency

    Returns:
        CurrentTeamResponse with the team, or a null team
    """
    user = await get_current_user(db, caller)
    if user is None:
        return CurrentTeamResponse(team=None)

    summary = await get_current_team_details(db, user)
    return CurrentTeamResponse(team=_to_response(summary) if summary else None)


@router.get("/v1/me/teams", response_model=list[TeamSummaryResponse])
async def list_my_teams(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> list[TeamSummaryResponse]:
    """
    List every team the caller belongs to, oldest membership first.

    Args:
        caller: Caller context from the Authorization header
        db: Async database session from dependency

    Returns:
        List of TeamSummaryResponse (empty for anonymous callers)
    """
    user = await get_current_user(db, caller)
    if user is None:
        return []

    teams = await list_user_teams(db, user)
    logger.info(f"list_my_teams_success: user_id={user.id}, count={len(teams)}")
    return [_to_response(summary) for summary in teams]


@router.put("/v1/me/team", response_model=SuccessResponse)
async def select_my_team(
    body: SetCurrentTeamRequest,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """
    Select a team as the caller's current context.

    Args:
        body: Team to select
        caller: Caller context from the Authorization header
        db: Async database session from dependency

    Returns:
        SuccessResponse with the selected team ID

    Raises:
        AuthenticationError: 401 if the caller is anonymous
        TeamNotFoundError: 404 if the team does not exist
        NotAMemberError: 403 if the caller is not a member
    """
    user = await require_user(db, caller)
    await set_current_team(db, user, body.team_id)
    await db.commit()
    return SuccessResponse(message="Current team updated", data={"team_id": str(body.team_id)})


@router.delete("/v1/me/team", response_model=SuccessResponse)
async def clear_my_team(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """
    Clear the caller's current team selection.

    Args:
        caller: Caller context from the Authorization header
        db: Async database session from dependency

    Returns:
        SuccessResponse

    Raises:
        AuthenticationError: 401 if the caller is anonymous
    """
    user = await require_user(db, caller)
    await clear_current_team(db, user)
    await db.commit()
    return SuccessResponse(message="Current team cleared")
