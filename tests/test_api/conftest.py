"""Shared fixtures for API router tests."""

from typing import AsyncGenerator, Callable, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from teamthreads.api.app import create_app
from teamthreads.api.dependencies import get_db, get_settings
from teamthreads.auth.jwt import create_access_token
from teamthreads.db.models import UserORM
from teamthreads.settings import Settings


@pytest.fixture
async def app(session: AsyncSession, test_settings: Settings):
    """FastAPI application instance for testing.

    Creates a FastAPI app with test overrides:
    - The test's SQLite session as the request session
    - Test settings with JWT secret key

    Args:
        session: Per-test database session fixture.
        test_settings: Settings fixture with a JWT secret.

    Yields:
        Configured FastAPI application.
    """
    test_app = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield session

    def override_get_settings() -> Settings:
        return test_settings

    test_app.dependency_overrides[get_db] = override_get_db
    test_app.dependency_overrides[get_settings] = override_get_settings

    yield test_app

    test_app.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """httpx AsyncClient for making test requests without auth.

    Args:
        app: FastAPI application fixture.

    Yields:
        An AsyncClient bound to the test app.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers(test_settings: Settings) -> Callable[[UserORM], Dict[str, str]]:
    """Build JWT authorization headers for a seeded user.

    Returns:
        Function mapping a user to a header dict with a Bearer token.
    """

    def _headers(user: UserORM) -> Dict[str, str]:
        token = create_access_token(user.id, settings=test_settings)
        return {"Authorization": f"Bearer {token}"}

    return _headers
