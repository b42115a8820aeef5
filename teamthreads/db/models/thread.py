"""Thread, ThreadParticipant, and ThreadMessage ORM models."""

import enum
from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamthreads.db.base import Base, TimestampMixin, UUIDMixin, utcnow

if TYPE_CHECKING:
    from teamthreads.db.models.user import TeamORM


class ThreadTypeEnum(str, enum.Enum):
    """Kind of conversation a thread holds.

    Maps to the ``thread_type`` PostgreSQL enum type.
    """

    TEAM = "team"
    EVENT = "event"
    AI = "ai"


class ThreadParticipantRoleEnum(str, enum.Enum):
    """Thread-level moderation role.

    Maps to the ``thread_participant_role`` PostgreSQL enum type.
    """

    ADMIN = "admin"
    PARTICIPANT = "participant"


class MessageTypeEnum(str, enum.Enum):
    """Origin of a thread message. Only ``text`` messages have a user author.

    Maps to the ``message_type`` PostgreSQL enum type.
    """

    TEXT = "text"
    SYSTEM = "system"
    AI = "ai"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class ThreadORM(Base, UUIDMixin, TimestampMixin):
    """A team-scoped conversation container.

    ``last_message_at`` is denormalized from thread_message for sorting.
    Maps to the ``thread`` table.
    """

    __tablename__ = "thread"
    __table_args__ = (Index("ix_thread_team_id", "team_id"),)

    team_id: Mapped[UUID] = mapped_column(ForeignKey("team.id", ondelete="CASCADE"), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    thread_type: Mapped[ThreadTypeEnum] = mapped_column(
        Enum(
            ThreadTypeEnum,
            name="thread_type",
            native_enum=True,
            create_constraint=False,
            values_callable=_enum_values,
        ),
        nullable=False,
        server_default=text("'team'"),
    )
    created_by: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("user.id", ondelete="SET NULL"), nullable=True
    )
    is_archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    last_message_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    team: Mapped["TeamORM"] = relationship("TeamORM", back_populates="threads")


class ThreadParticipantORM(Base, UUIDMixin):
    """Join table gating read/write access to a thread.

    Maps to the ``thread_participant`` table.
    """

    __tablename__ = "thread_participant"
    __table_args__ = (
        UniqueConstraint("thread_id", "user_id", name="uq_thread_participant"),
    )

    thread_id: Mapped[UUID] = mapped_column(
        ForeignKey("thread.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[UUID] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    role: Mapped[ThreadParticipantRoleEnum] = mapped_column(
        Enum(
            ThreadParticipantRoleEnum,
            name="thread_participant_role",
            native_enum=True,
            create_constraint=False,
            values_callable=_enum_values,
        ),
        nullable=False,
        server_default=text("'participant'"),
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )
    last_read_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class ThreadMessageORM(Base, UUIDMixin):
    """A message in a thread, optionally replying to a top-level message.

    Storage is a flat table with a nullable ``reply_to_id`` back-pointer; the
    read path reshapes it into top-level messages with their direct replies.
    Maps to the ``thread_message`` table.
    """

    __tablename__ = "thread_message"
    __table_args__ = (
        Index("ix_thread_message_thread_created", "thread_id", "created_at"),
        Index("ix_thread_message_reply_to", "reply_to_id"),
    )

    thread_id: Mapped[UUID] = mapped_column(
        ForeignKey("thread.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("user.id", ondelete="SET NULL"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    message_type: Mapped[MessageTypeEnum] = mapped_column(
        Enum(
            MessageTypeEnum,
            name="message_type",
            native_enum=True,
            create_constraint=False,
            values_callable=_enum_values,
        ),
        nullable=False,
        server_default=text("'text'"),
    )
    reply_to_id: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("thread_message.id", ondelete="CASCADE"), nullable=True
    )
    edited_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )
