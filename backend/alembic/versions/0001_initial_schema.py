"""Initial schema: users, resources, timetable, chat and skills.

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _user_fk() -> sa.Column:
    return sa.Column(
        "user_id",
        sa.Uuid(),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )


def _owned_table_indexes(table: str) -> None:
    op.create_index(f"ix_{table}_user_id", table, ["user_id"])
    op.create_index(f"ix_{table}_created_at", table, ["created_at"])


def upgrade() -> None:
    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(254), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("level", sa.String(100), nullable=True),
        sa.Column("objectives", sa.JSON(), nullable=False),
        sa.Column("onboarding_complete", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "resources",
        *_base_columns(),
        _user_fk(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("subject", sa.String(100), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    _owned_table_indexes("resources")
    op.create_index("ix_resources_user_subject", "resources", ["user_id", "subject"])

    op.create_table(
        "schedule_blocks",
        *_base_columns(),
        _user_fk(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("type", sa.String(50), nullable=False, server_default="course"),
        sa.Column("color", sa.String(32), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    _owned_table_indexes("schedule_blocks")

    op.create_table(
        "revision_slots",
        *_base_columns(),
        _user_fk(),
        sa.Column("subject", sa.String(100), nullable=False),
        sa.Column("method", sa.String(50), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
    )
    _owned_table_indexes("revision_slots")

    op.create_table(
        "chat_messages",
        *_base_columns(),
        _user_fk(),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    _owned_table_indexes("chat_messages")

    op.create_table(
        "skills",
        *_base_columns(),
        _user_fk(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "name", name="uq_skills_user_name"),
    )
    _owned_table_indexes("skills")

    op.create_table(
        "diagnostic_results",
        *_base_columns(),
        _user_fk(),
        sa.Column("subject", sa.String(100), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("total", sa.Integer(), nullable=False),
        sa.Column("weak_areas", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    _owned_table_indexes("diagnostic_results")


def downgrade() -> None:
    for table in (
        "diagnostic_results",
        "skills",
        "chat_messages",
        "revision_slots",
        "schedule_blocks",
        "resources",
        "users",
    ):
        op.drop_table(table)
