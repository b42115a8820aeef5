"""User, Team, and TeamMembership ORM models."""

import enum
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamthreads.db.base import Base, TimestampMixin, UUIDMixin, utcnow

if TYPE_CHECKING:
    from teamthreads.db.models.thread import ThreadORM


class TeamRole(str, enum.Enum):
    """Role a user can hold within a team.

    Maps to the ``team_role`` PostgreSQL enum type.
    """

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class UserORM(Base, UUIDMixin, TimestampMixin):
    """Platform user account.

    Created at first authentication by the upstream identity provider. Each
    user belongs to zero or more teams via TeamMembershipORM.
    ``current_team_id`` is only a pointer to the last selected team and is
    re-validated against team_membership on every use.
    Maps to the ``user`` table.
    """

    __tablename__ = "user"

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True, unique=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    current_team_id: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("team.id", ondelete="SET NULL", use_alter=True, name="fk_user_current_team"),
        nullable=True,
    )

    # Relationships
    memberships: Mapped[List["TeamMembershipORM"]] = relationship(
        "TeamMembershipORM", back_populates="user", cascade="all, delete-orphan"
    )


class TeamORM(Base, UUIDMixin, TimestampMixin):
    """Multi-tenant root entity.

    Created by team management (outside this service); read-only here.
    Maps to the ``team`` table.
    """

    __tablename__ = "team"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    owner_id: Mapped[UUID] = mapped_column(ForeignKey("user.id"), nullable=False)

    # Relationships
    owner: Mapped["UserORM"] = relationship("UserORM", foreign_keys=[owner_id])
    memberships: Mapped[List["TeamMembershipORM"]] = relationship(
        "TeamMembershipORM", back_populates="team", cascade="all, delete-orphan"
    )
    threads: Mapped[List["ThreadORM"]] = relationship(
        "ThreadORM", back_populates="team", cascade="all, delete-orphan"
    )


class TeamMembershipORM(Base, UUIDMixin):
    """RBAC join table linking users to teams with a role.

    At most one membership exists per (team, user) pair.
    Maps to the ``team_membership`` table.
    """

    __tablename__ = "team_membership"
    __table_args__ = (UniqueConstraint("team_id", "user_id", name="uq_team_membership"),)

    team_id: Mapped[UUID] = mapped_column(ForeignKey("team.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[UUID] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    role: Mapped[TeamRole] = mapped_column(
        Enum(
            TeamRole,
            name="team_role",
            native_enum=True,
            create_constraint=False,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        server_default=text("'member'"),
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )

    # Relationships
    user: Mapped["UserORM"] = relationship("UserORM", back_populates="memberships")
    team: Mapped["TeamORM"] = relationship("TeamORM", back_populates="memberships")
