"""Shared fixtures: in-memory SQLite database and record factories."""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from teamthreads.auth.identity import CallerContext
from teamthreads.db.base import Base
from teamthreads.db.models import (
    MessageTypeEnum,
    TeamMembershipORM,
    TeamORM,
    TeamRole,
    ThreadMessageORM,
    ThreadORM,
    ThreadParticipantORM,
    ThreadParticipantRoleEnum,
    UserORM,
)
from teamthreads.settings import Settings

TEST_JWT_SECRET = "test-secret-key-for-jwt-testing-only-not-for-production"


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a JWT secret and no external services."""
    return Settings(
        jwt_secret_key=TEST_JWT_SECRET,
        database_url=None,
        logfire_token=None,
    )


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Async engine on a private in-memory SQLite database with all tables created."""
    test_engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """One AsyncSession per test, never expiring on commit."""
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as db:
        yield db


class Seeder:
    """Inserts users, teams, memberships, threads and messages for a test."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    async def user(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> UserORM:
        n = self._next()
        user = UserORM(
            name=name if name is not None else f"User {n}",
            email=email if email is not None else f"user{n}@example.com",
            phone=phone,
        )
        self.session.add(user)
        await self.session.flush()
        return user

    async def team(self, owner: UserORM, name: Optional[str] = None) -> TeamORM:
        n = self._next()
        team = TeamORM(name=name or f"Team {n}", slug=f"team-{n}", owner_id=owner.id)
        self.session.add(team)
        await self.session.flush()
        await self.member(team, owner, TeamRole.OWNER)
        return team

    async def member(
        self, team: TeamORM, user: UserORM, role: TeamRole = TeamRole.MEMBER
    ) -> TeamMembershipORM:
        membership = TeamMembershipORM(team_id=team.id, user_id=user.id, role=role)
        self.session.add(membership)
        await self.session.flush()
        return membership

    async def thread(
        self,
        team: TeamORM,
        admin: Optional[UserORM] = None,
        participants: tuple[UserORM, ...] = (),
        is_archived: bool = False,
    ) -> ThreadORM:
        thread = ThreadORM(
            team_id=team.id,
            title=f"Thread {self._next()}",
            created_by=admin.id if admin else None,
            is_archived=is_archived,
        )
        self.session.add(thread)
        await self.session.flush()
        if admin is not None:
            await self.participant(thread, admin, ThreadParticipantRoleEnum.ADMIN)
        for user in participants:
            await self.participant(thread, user)
        return thread

    async def participant(
        self,
        thread: ThreadORM,
        user: UserORM,
        role: ThreadParticipantRoleEnum = ThreadParticipantRoleEnum.PARTICIPANT,
    ) -> ThreadParticipantORM:
        participant = ThreadParticipantORM(thread_id=thread.id, user_id=user.id, role=role)
        self.session.add(participant)
        await self.session.flush()
        return participant

    async def message(
        self,
        thread: ThreadORM,
        author: Optional[UserORM],
        content: str,
        created_at: datetime,
        reply_to: Optional[ThreadMessageORM] = None,
        message_type: MessageTypeEnum = MessageTypeEnum.TEXT,
    ) -> ThreadMessageORM:
        message = ThreadMessageORM(
            thread_id=thread.id,
            author_id=author.id if author else None,
            content=content,
            message_type=message_type,
            reply_to_id=reply_to.id if reply_to else None,
            created_at=created_at,
        )
        self.session.add(message)
        await self.session.flush()
        return message


@pytest.fixture
def seed(session: AsyncSession) -> Seeder:
    """Record factory bound to the test session."""
    return Seeder(session)


@pytest.fixture
def base_time() -> datetime:
    """Fixed reference time; tests add minutes to order rows deterministically."""
    return datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def at(base: datetime, minutes: int) -> datetime:
    return base + timedelta(minutes=minutes)


def caller_for(user: UserORM) -> CallerContext:
    return CallerContext(user_id=user.id)


@pytest.fixture
def as_caller():
    """Build a CallerContext for a seeded user."""
    return caller_for


@pytest.fixture
def minutes_after():
    """Offset a base time by whole minutes."""
    return at
