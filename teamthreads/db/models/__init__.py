"""ORM models for database tables."""

from teamthreads.db.models.thread import (
    MessageTypeEnum,
    ThreadMessageORM,
    ThreadORM,
    ThreadParticipantORM,
    ThreadParticipantRoleEnum,
    ThreadTypeEnum,
)
from teamthreads.db.models.user import TeamMembershipORM, TeamORM, TeamRole, UserORM

__all__ = [
    "MessageTypeEnum",
    "TeamMembershipORM",
    "TeamORM",
    "TeamRole",
    "ThreadMessageORM",
    "ThreadORM",
    "ThreadParticipantORM",
    "ThreadParticipantRoleEnum",
    "ThreadTypeEnum",
    "UserORM",
]
