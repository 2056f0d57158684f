"""initial_schema

Create the schema for the comment service:
- Users (keyed by the identity provider's user id, with moderation state)
- Comments (threaded, soft-deleted, with edit history)
- Comment votes (one row per voter, up or down)
- Comment tags (spoiler, warning, pinned)
- Rate limits (per-user action buckets)
- Moderation records, comment reports and audit logs

Revision ID: 3f1c2a9d7e41
Revises:
Create Date: 2026-10-16 09:12:44.218301

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7e41"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sa.text("NOW()"),
    )


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # USERS table (id is the identity provider's user id)
    # ========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="USER"),
        sa.Column("is_banned", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("ban_reason", sa.Text(), nullable=True),
        sa.Column("ban_expires", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "shadow_banned", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column("shadow_ban_reason", sa.Text(), nullable=True),
        sa.Column("shadow_ban_expires", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("is_muted", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("mute_expires", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("warning_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_warns", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_upvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "total_downvotes", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column("rank_score", sa.Integer(), nullable=False, server_default="0"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        _timestamp("last_active"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "role IN ('USER', 'MODERATOR', 'ADMIN', 'SUPER_ADMIN')",
            name="valid_role",
        ),
        sa.CheckConstraint("total_upvotes >= 0", name="total_upvotes_non_negative"),
        sa.CheckConstraint(
            "total_downvotes >= 0", name="total_downvotes_non_negative"
        ),
        sa.CheckConstraint("rank_score BETWEEN 0 AND 100", name="rank_score_range"),
    )
    op.create_index("idx_users_role", "users", ["role"])

    # ========================================================================
    # COMMENTS table (parents are only ever soft-deleted)
    # ========================================================================
    op.create_table(
        "comments",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("media_id", sa.BigInteger(), nullable=False),
        sa.Column(
            "media_type", sa.String(10), nullable=False, server_default="ANIME"
        ),
        sa.Column("author_id", sa.BigInteger(), nullable=False),
        sa.Column("parent_comment_id", sa.UUID(), nullable=True),
        sa.Column("root_comment_id", sa.UUID(), nullable=True),
        sa.Column(
            "depth_level", sa.SmallInteger(), nullable=False, server_default="0"
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("upvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("downvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_votes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("deleted_by", sa.BigInteger(), nullable=True),
        sa.Column("delete_reason", sa.Text(), nullable=True),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("is_edited", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column(
            "edit_history",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("pin_expires", sa.TIMESTAMP(timezone=True), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["parent_comment_id"], ["comments.id"], ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(
            ["root_comment_id"], ["comments.id"], ondelete="RESTRICT"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("depth_level BETWEEN 0 AND 20", name="depth_level_range"),
        sa.CheckConstraint(
            "(parent_comment_id IS NULL) = (depth_level = 0)",
            name="depth_matches_parent",
        ),
        sa.CheckConstraint(
            "media_type IN ('ANIME', 'MANGA')", name="valid_media_type"
        ),
        sa.CheckConstraint(
            "total_votes = upvotes + downvotes", name="vote_totals_match"
        ),
    )
    op.create_index(
        "idx_comments_media_top_level",
        "comments",
        ["media_id", "media_type", sa.text("created_at DESC")],
        postgresql_where=sa.text("parent_comment_id IS NULL"),
    )
    op.create_index("idx_comments_parent_id", "comments", ["parent_comment_id"])
    op.create_index("idx_comments_root_id", "comments", ["root_comment_id"])
    op.create_index("idx_comments_author_id", "comments", ["author_id"])

    # ========================================================================
    # COMMENT_VOTES table (one row per voter and comment)
    # ========================================================================
    op.create_table(
        "comment_votes",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("comment_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("vote_type", sa.SmallInteger(), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["comment_id"], ["comments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("comment_id", "user_id", name="unique_comment_vote"),
        sa.CheckConstraint("vote_type IN (-1, 1)", name="valid_vote_type"),
    )
    op.create_index("idx_comment_votes_user_id", "comment_votes", ["user_id"])

    # ========================================================================
    # COMMENT_TAGS table
    # ========================================================================
    op.create_table(
        "comment_tags",
        sa.Column("comment_id", sa.UUID(), nullable=False),
        sa.Column("tag_type", sa.String(20), nullable=False),
        sa.Column("tagged_by", sa.BigInteger(), nullable=False),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=True),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["comment_id"], ["comments.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("comment_id", "tag_type", name="unique_comment_tag"),
        sa.CheckConstraint(
            "tag_type IN ('SPOILER', 'WARNING', 'PINNED')", name="valid_tag_type"
        ),
    )

    # ========================================================================
    # RATE_LIMITS table (one row per user, action and bucket)
    # ========================================================================
    op.create_table(
        "rate_limits",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("action_type", sa.String(20), nullable=False),
        sa.Column("window_start", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("window_end", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("action_count", sa.Integer(), nullable=False, server_default="1"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id",
            "action_type",
            "window_start",
            name="unique_rate_limit_bucket",
        ),
    )
    op.create_index(
        "idx_rate_limits_user_action_end",
        "rate_limits",
        ["user_id", "action_type", "window_end"],
    )
    op.create_index("idx_rate_limits_window_end", "rate_limits", ["window_end"])

    # ========================================================================
    # MODERATION_RECORDS table (append-only)
    # ========================================================================
    op.create_table(
        "moderation_records",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("action", sa.String(30), nullable=False),
        sa.Column("actor_id", sa.BigInteger(), nullable=False),
        sa.Column("target_id", sa.BigInteger(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("old_role", sa.String(20), nullable=True),
        sa.Column("new_role", sa.String(20), nullable=True),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["target_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_moderation_records_target",
        "moderation_records",
        ["target_id", sa.text("created_at DESC")],
    )

    # ========================================================================
    # COMMENT_REPORTS table
    # ========================================================================
    op.create_table(
        "comment_reports",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("comment_id", sa.UUID(), nullable=False),
        sa.Column("reporter_id", sa.BigInteger(), nullable=False),
        sa.Column("reason", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("reviewed_by", sa.BigInteger(), nullable=True),
        sa.Column("reviewed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("review_note", sa.Text(), nullable=True),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["comment_id"], ["comments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reporter_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "comment_id", "reporter_id", name="unique_comment_report"
        ),
    )
    op.create_index(
        "idx_comment_reports_status",
        "comment_reports",
        ["status", sa.text("created_at DESC")],
    )

    # ========================================================================
    # AUDIT_LOGS table (append-only)
    # ========================================================================
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("actor_id", sa.BigInteger(), nullable=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("target_type", sa.String(30), nullable=False),
        sa.Column("target_id", sa.String(64), nullable=False),
        sa.Column(
            "details",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_audit_logs_actor", "audit_logs", ["actor_id"])
    op.create_index("idx_audit_logs_action", "audit_logs", ["action"])
    op.create_index(
        "idx_audit_logs_target", "audit_logs", ["target_type", "target_id"]
    )
    op.create_index(
        "idx_audit_logs_created_at", "audit_logs", [sa.text("created_at DESC")]
    )


def downgrade() -> None:
    """Downgrade schema."""
    # Drop tables (in reverse order of dependencies)
    op.drop_table("audit_logs")
    op.drop_table("comment_reports")
    op.drop_table("moderation_records")
    op.drop_table("rate_limits")
    op.drop_table("comment_tags")
    op.drop_table("comment_votes")
    op.drop_table("comments")
    op.drop_table("users")
