"""create groups, groups_users and group_requests tables

Revision ID: 004
Revises: 003
Create Date: 2026-10-19 10:20:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "groups",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("schedule", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("chronic", sa.Text(), nullable=False),
        sa.Column("master", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["master"], ["users.id"]),
    )
    op.create_index("ix_groups_id", "groups", ["id"], unique=False)
    op.create_index("ix_groups_master", "groups", ["master"], unique=False)

    op.create_table(
        "groups_users",
        sa.Column("group_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("group_id", "user_id"),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )

    op.create_table(
        "group_requests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("group_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "status IN ('PENDING', 'ACCEPTED')",
            name="ck_group_requests_status",
        ),
    )
    op.create_index("ix_group_requests_id", "group_requests", ["id"], unique=False)
    op.create_index("ix_group_requests_user_id", "group_requests", ["user_id"], unique=False)
    op.create_index("ix_group_requests_group_id", "group_requests", ["group_id"], unique=False)
    # Partial unique index: a user can only have one PENDING request per group.
    # Both SQLite and PostgreSQL support WHERE on CREATE INDEX.
    op.create_index(
        "uq_group_requests_pending_user_group",
        "group_requests",
        ["user_id", "group_id"],
        unique=True,
        sqlite_where=sa.text("status = 'PENDING'"),
        postgresql_where=sa.text("status = 'PENDING'"),
    )


def downgrade() -> None:
    op.drop_index("uq_group_requests_pending_user_group", table_name="group_requests")
    op.drop_index("ix_group_requests_group_id", table_name="group_requests")
    op.drop_index("ix_group_requests_user_id", table_name="group_requests")
    op.drop_index("ix_group_requests_id", table_name="group_requests")
    op.drop_table("group_requests")
    op.drop_table("groups_users")
    op.drop_index("ix_groups_master", table_name="groups")
    op.drop_index("ix_groups_id", table_name="groups")
    op.drop_table("groups")
