"""Initial schema: users, sessions, ideas, ratings, user stats, friendships.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_NOW = sa.text("CURRENT_TIMESTAMP")


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=_NOW, nullable=False)


def _user_fk(table: str, name: str) -> sa.Column:
    fk = sa.ForeignKey("users.id", ondelete="CASCADE", name=f"fk_{table}_{name}_users")
    return sa.Column(name, sa.String(36), fk, nullable=False)


def upgrade() -> None:
    # --- Users ---
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("username", sa.String(32), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(256), nullable=False),
        sa.Column("first_name", sa.String(64), nullable=True),
        sa.Column("last_name", sa.String(64), nullable=True),
        sa.Column("profile_image_url", sa.Text(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # --- Sessions ---
    op.create_table(
        "user_sessions",
        sa.Column("sid", sa.String(64), nullable=False),
        _user_fk("user_sessions", "user_id"),
        _timestamp("created_at"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("sid", name="pk_user_sessions"),
    )
    op.create_index("ix_user_sessions_expires_at", "user_sessions", ["expires_at"])

    # --- Ideas ---
    op.create_table(
        "ideas",
        sa.Column("id", sa.String(36), nullable=False),
        _user_fk("ideas", "author_id"),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("is_anonymous", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("average_rating", sa.Float(), server_default="0", nullable=False),
        sa.Column("rating_count", sa.Integer(), server_default="0", nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_ideas"),
    )
    op.create_index("ix_ideas_created_at_id", "ideas", ["created_at", "id"])
    op.create_index("ix_ideas_rating_count", "ideas", ["rating_count"])

    # --- Ratings ---
    op.create_table(
        "ratings",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column(
            "idea_id",
            sa.String(36),
            sa.ForeignKey("ideas.id", ondelete="CASCADE", name="fk_ratings_idea_id_ideas"),
            nullable=False,
        ),
        _user_fk("ratings", "user_id"),
        sa.Column("score", sa.Integer(), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_ratings"),
        sa.UniqueConstraint("user_id", "idea_id", name="uq_ratings_user_idea"),
        sa.CheckConstraint("score BETWEEN 1 AND 10", name="ck_ratings_score_range"),
    )
    op.create_index("ix_ratings_idea_id", "ratings", ["idea_id"])
    op.create_index("ix_ratings_user_id", "ratings", ["user_id"])

    # --- User stats ---
    op.create_table(
        "user_stats",
        sa.Column("id", sa.String(36), nullable=False),
        _user_fk("user_stats", "user_id"),
        sa.Column("ideas_submitted", sa.Integer(), server_default="0", nullable=False),
        sa.Column("ratings_given", sa.Integer(), server_default="0", nullable=False),
        sa.Column("average_rating_received", sa.Float(), server_default="0", nullable=False),
        sa.Column("total_ratings_received", sa.Integer(), server_default="0", nullable=False),
        sa.Column("batshit_score", sa.Integer(), server_default="0", nullable=False),
        sa.Column("achievements", sa.JSON(), server_default=sa.text("'[]'"), nullable=False),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_user_stats"),
        sa.UniqueConstraint("user_id", name="uq_user_stats_user_id"),
    )

    # --- Friendships ---
    op.create_table(
        "friendships",
        sa.Column("id", sa.String(36), nullable=False),
        _user_fk("friendships", "requester_id"),
        _user_fk("friendships", "target_id"),
        sa.Column("pair_key", sa.String(73), nullable=False),
        sa.Column("status", sa.String(16), server_default="pending", nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_friendships"),
        sa.UniqueConstraint("pair_key", name="uq_friendships_pair_key"),
        sa.CheckConstraint("status IN ('pending', 'accepted', 'rejected')", name="ck_friendships_status_valid"),
    )
    op.create_index("ix_friendships_requester_id", "friendships", ["requester_id"])
    op.create_index("ix_friendships_target_status", "friendships", ["target_id", "status"])


def downgrade() -> None:
    op.drop_table("friendships")
    op.drop_table("user_stats")
    op.drop_table("ratings")
    op.drop_table("ideas")
    op.drop_table("user_sessions")
    op.drop_table("users")
