"""init_schema

Revision ID: 7c1e4a2b9d10
Revises: 
Create Date: 2026-10-19 10:02:11.412907

"""
from alembic import op
import sqlalchemy as sa


revision = '7c1e4a2b9d10'
down_revision = None
branch_labels = None
depends_on = None

task_status = sa.Enum("PENDING", "IN_PROGRESS", "COMPLETED", name="taskstatus")


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "task",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("status", task_status, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_task_user_id", "task", ["user_id"], unique=False)
    op.create_index("ix_task_status", "task", ["status"], unique=False)
    op.create_index("ix_task_created_at", "task", ["created_at"], unique=False)

    op.create_table(
        "refreshtoken",
        sa.Column("jti", sa.String(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("token_hash", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("replaced_by", sa.String(), nullable=True),
        sa.Column("ip", sa.String(), nullable=True),
        sa.Column("user_agent", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("jti"),
    )
    op.create_index("ix_refreshtoken_jti", "refreshtoken", ["jti"], unique=False)
    op.create_index(
        "ix_refreshtoken_user_id",
        "refreshtoken",
        ["user_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_refreshtoken_user_id", table_name="refreshtoken")
    op.drop_index("ix_refreshtoken_jti", table_name="refreshtoken")
    op.drop_table("refreshtoken")

    op.drop_index("ix_task_created_at", table_name="task")
    op.drop_index("ix_task_status", table_name="task")
    op.drop_index("ix_task_user_id", table_name="task")
    op.drop_table("task")
    task_status.drop(op.get_bind(), checkfirst=True)

    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")
