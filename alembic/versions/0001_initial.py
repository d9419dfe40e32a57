"""users, posts and comments with soft deletion

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

ACTIVE_ROWS = sa.text("deleted_at IS NULL")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("avatar_url", sa.String(length=500), nullable=False),
        sa.Column("avatar_tag", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_deleted_at", "users", ["deleted_at"], unique=False)
    # Uniqueness only among active users: soft-deleted identities are reusable.
    op.create_index(
        "uq_users_email_active", "users", ["email"], unique=True,
        postgresql_where=ACTIVE_ROWS, sqlite_where=ACTIVE_ROWS,
    )
    op.create_index(
        "uq_users_username_active", "users", ["username"], unique=True,
        postgresql_where=ACTIVE_ROWS, sqlite_where=ACTIVE_ROWS,
    )

    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_posts_user_id", "posts", ["user_id"], unique=False)
    op.create_index("ix_posts_deleted_at_created_at", "posts", ["deleted_at", "created_at"], unique=False)

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("posts.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_comments_user_id", "comments", ["user_id"], unique=False)
    op.create_index("ix_comments_post_id", "comments", ["post_id"], unique=False)
    op.create_index("ix_comments_post_id_created_at", "comments", ["post_id", "created_at"], unique=False)


def downgrade() -> None:
    op.drop_table("comments")
    op.drop_table("posts")
    op.drop_index("uq_users_username_active", table_name="users")
    op.drop_index("uq_users_email_active", table_name="users")
    op.drop_index("ix_users_deleted_at", table_name="users")
    op.drop_table("users")
