"""Initial schema: users, teams, memberships and threaded messages.

Revision ID: 001
Revises:
Create Date: 2026-10-16
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    # =========================================================================
    # ENUM TYPES
    # =========================================================================
    op.execute("CREATE TYPE team_role AS ENUM ('owner', 'admin', 'member')")
    op.execute("CREATE TYPE thread_type AS ENUM ('team', 'event', 'ai')")
    op.execute("CREATE TYPE thread_participant_role AS ENUM ('admin', 'participant')")
    op.execute("CREATE TYPE message_type AS ENUM ('text', 'system', 'ai')")

    # =========================================================================
    # TABLE 1: user (current_team_id FK is added after team exists)
    # =========================================================================
    op.create_table(
        "user",
        sa.Column("id", sa.Uuid(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("phone", sa.Text(), nullable=True),
        sa.Column("current_team_id", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_user_email"),
    )

    # =========================================================================
    # TABLE 2: team
    # =========================================================================
    op.create_table(
        "team",
        sa.Column("id", sa.Uuid(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("owner_id", sa.Uuid(), sa.ForeignKey("user.id"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="uq_team_slug"),
    )

    op.create_foreign_key(
        "fk_user_current_team",
        "user",
        "team",
        ["current_team_id"],
        ["id"],
        ondelete="SET NULL",
    )

    # =========================================================================
    # TABLE 3: team_membership
    # =========================================================================
    op.create_table(
        "team_membership",
        sa.Column("id", sa.Uuid(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "team_id",
            sa.Uuid(),
            sa.ForeignKey("team.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "role",
            postgresql.ENUM("owner", "admin", "member", name="team_role", create_type=False),
            nullable=False,
            server_default=sa.text("'member'"),
        ),
        sa.Column(
            "joined_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.UniqueConstraint("team_id", "user_id", name="uq_team_membership"),
    )

    # =========================================================================
    # TABLE 4: thread
    # =========================================================================
    op.create_table(
        "thread",
        sa.Column("id", sa.Uuid(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "team_id",
            sa.Uuid(),
            sa.ForeignKey("team.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "thread_type",
            postgresql.ENUM("team", "event", "ai", name="thread_type", create_type=False),
            nullable=False,
            server_default=sa.text("'team'"),
        ),
        sa.Column(
            "created_by",
            sa.Uuid(),
            sa.ForeignKey("user.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("last_message_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    # =========================================================================
    # TABLE 5: thread_participant
    # =========================================================================
    op.create_table(
        "thread_participant",
        sa.Column("id", sa.Uuid(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "thread_id",
            sa.Uuid(),
            sa.ForeignKey("thread.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "role",
            postgresql.ENUM(
                "admin", "participant", name="thread_participant_role", create_type=False
            ),
            nullable=False,
            server_default=sa.text("'participant'"),
        ),
        sa.Column(
            "joined_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("last_read_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("thread_id", "user_id", name="uq_thread_participant"),
    )

    # =========================================================================
    # TABLE 6: thread_message
    # =========================================================================
    op.create_table(
        "thread_message",
        sa.Column("id", sa.Uuid(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "thread_id",
            sa.Uuid(),
            sa.ForeignKey("thread.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "author_id",
            sa.Uuid(),
            sa.ForeignKey("user.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "message_type",
            postgresql.ENUM("text", "system", "ai", name="message_type", create_type=False),
            nullable=False,
            server_default=sa.text("'text'"),
        ),
        sa.Column(
            "reply_to_id",
            sa.Uuid(),
            sa.ForeignKey("thread_message.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("edited_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )

    # =========================================================================
    # INDEXES
    # =========================================================================
    op.create_index("idx_membership_user", "team_membership", ["user_id"])
    op.create_index("ix_thread_team_id", "thread", ["team_id"])
    op.create_index("idx_thread_participant_user", "thread_participant", ["user_id"])
    op.create_index(
        "ix_thread_message_thread_created", "thread_message", ["thread_id", "created_at"]
    )
    op.create_index("ix_thread_message_reply_to", "thread_message", ["reply_to_id"])


def downgrade() -> None:
    # =========================================================================
    # TABLES (reverse order respecting FK dependencies)
    # =========================================================================
    op.drop_table("thread_message")
    op.drop_table("thread_participant")
    op.drop_table("thread")
    op.drop_table("team_membership")
    op.drop_constraint("fk_user_current_team", "user", type_="foreignkey")
    op.drop_table("team")
    op.drop_table("user")

    # =========================================================================
    # ENUM TYPES
    # =========================================================================
    op.execute("DROP TYPE IF EXISTS message_type")
    op.execute("DROP TYPE IF EXISTS thread_participant_role")
    op.execute("DROP TYPE IF EXISTS thread_type")
    op.execute("DROP TYPE IF EXISTS team_role")
