"""FastAPI dependency injection for database and settings."""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.db.engine import get_session
from teamthreads.settings import Settings, load_settings

logger = logging.getLogger(__name__)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Get async database session from app.state.engine.

    Yields an AsyncSession that is automatically closed after use. One
    session per request: mutations commit it once at the end, queries never
    commit, and anything uncommitted is rolled back on close.

    Args:
        request: FastAPI request object with app.state.engine.

    Yields:
        AsyncSession instance for database operations.

    Raises:
        RuntimeError: If app.state.engine is not initialized.
    """
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        logger.error("get_db_error: reason=engine_not_initialized")
        raise RuntimeError(
            "Database engine not initialized. Ensure DATABASE_URL is set and app lifespan has run."
        )

    async for session in get_session(engine):
        logger.debug("db_session_created: engine=initialized")
        yield session
        logger.debug("db_session_closed: cleanup=complete")


def get_settings(request: Request) -> Settings:
    """
    Get application settings from app.state.settings.

    Falls back to load_settings() if the lifespan has not populated app.state.

    Args:
        request: FastAPI request object with app.state.

    Returns:
        Settings instance with application configuration.
    """
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        logger.warning(
            "get_settings_fallback: app.state.settings not initialized, loading directly"
        )
        settings = load_settings()
    return settings
