"""Identity resolution: map an explicit caller context to a user record.

Read paths use ``get_current_user`` and get ``None`` for anonymous or
unknown callers. Write paths use ``require_user`` and fail hard, so a
mutation never silently does nothing.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.db.models.user import UserORM
from teamthreads.errors import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallerContext:
    """Verified identity of the caller for one request.

    ``user_id`` is None for anonymous callers. Built by the HTTP layer from
    the bearer token and passed explicitly into every operation.
    """

    user_id: Optional[UUID] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


ANONYMOUS = CallerContext()


async def get_current_user(session: AsyncSession, caller: CallerContext) -> Optional[UserORM]:
    """Return the caller's user record, or None.

    Args:
        session: Async SQLAlchemy session.
        caller: Explicit caller context.

    Returns:
        The user if the caller is authenticated and the record exists.
    """
    if caller.user_id is None:
        return None
    return await session.get(UserORM, caller.user_id)


async def require_user(session: AsyncSession, caller: CallerContext) -> UserORM:
    """Return the caller's user record or raise.

    Args:
        session: Async SQLAlchemy session.
        caller: Explicit caller context.

    Returns:
        The authenticated user.

    Raises:
        AuthenticationError: If the caller is anonymous or the user no longer exists.
    """
    user = await get_current_user(session, caller)
    if user is None:
        logger.warning(f"require_user_denied: user_id={caller.user_id}, reason=not_authenticated")
        raise AuthenticationError()
    return user
