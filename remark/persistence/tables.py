"""SQLAlchemy table definitions for remark.

These Core tables are used for queries and mapping.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    SmallInteger,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE (keyed by the identity provider's user id)
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", BigInteger, primary_key=True, autoincrement=False),
    Column("username", String(50), nullable=False),
    Column("avatar_url", Text, nullable=True),
    Column("role", String(20), nullable=False, server_default="USER"),
    Column("is_banned", Boolean, nullable=False, server_default="false"),
    Column("ban_reason", Text, nullable=True),
    Column("ban_expires", TIMESTAMP(timezone=True), nullable=True),
    Column("shadow_banned", Boolean, nullable=False, server_default="false"),
    Column("shadow_ban_reason", Text, nullable=True),
    Column("shadow_ban_expires", TIMESTAMP(timezone=True), nullable=True),
    Column("is_muted", Boolean, nullable=False, server_default="false"),
    Column("mute_expires", TIMESTAMP(timezone=True), nullable=True),
    Column("warning_count", Integer, nullable=False, server_default="0"),
    Column("total_warns", Integer, nullable=False, server_default="0"),
    Column("total_upvotes", Integer, nullable=False, server_default="0"),
    Column("total_downvotes", Integer, nullable=False, server_default="0"),
    Column("rank_score", Integer, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "last_active", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint(
        "role IN ('USER', 'MODERATOR', 'ADMIN', 'SUPER_ADMIN')", name="valid_role"
    ),
    CheckConstraint("total_upvotes >= 0", name="total_upvotes_non_negative"),
    CheckConstraint("total_downvotes >= 0", name="total_downvotes_non_negative"),
    CheckConstraint("rank_score BETWEEN 0 AND 100", name="rank_score_range"),
)

Index("idx_users_role", users_table.c.role)

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("media_id", BigInteger, nullable=False),
    Column("media_type", String(10), nullable=False, server_default="ANIME"),
    Column(
        "author_id",
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    # Parents are only ever soft-deleted
    Column(
        "parent_comment_id",
        UUID(as_uuid=True),
        ForeignKey("comments.id", ondelete="RESTRICT"),
        nullable=True,
    ),
    Column(
        "root_comment_id",
        UUID(as_uuid=True),
        ForeignKey("comments.id", ondelete="RESTRICT"),
        nullable=True,
    ),
    Column("depth_level", SmallInteger, nullable=False, server_default="0"),
    Column("content", Text, nullable=False),
    Column("upvotes", Integer, nullable=False, server_default="0"),
    Column("downvotes", Integer, nullable=False, server_default="0"),
    Column("total_votes", Integer, nullable=False, server_default="0"),
    Column("is_deleted", Boolean, nullable=False, server_default="false"),
    Column("deleted_by", BigInteger, nullable=True),
    Column("delete_reason", Text, nullable=True),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    Column("is_edited", Boolean, nullable=False, server_default="false"),
    Column("edit_history", JSONB, nullable=False, server_default="[]"),
    Column("is_pinned", Boolean, nullable=False, server_default="false"),
    Column("pin_expires", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("depth_level BETWEEN 0 AND 20", name="depth_level_range"),
    CheckConstraint(
        "(parent_comment_id IS NULL) = (depth_level = 0)", name="depth_matches_parent"
    ),
    CheckConstraint("media_type IN ('ANIME', 'MANGA')", name="valid_media_type"),
    CheckConstraint("total_votes = upvotes + downvotes", name="vote_totals_match"),
)

Index(
    "idx_comments_media_top_level",
    comments_table.c.media_id,
    comments_table.c.media_type,
    comments_table.c.created_at.desc(),
    postgresql_where=comments_table.c.parent_comment_id.is_(None),
)
Index("idx_comments_parent_id", comments_table.c.parent_comment_id)
Index("idx_comments_root_id", comments_table.c.root_comment_id)
Index("idx_comments_author_id", comments_table.c.author_id)

# ============================================================================
# COMMENT_VOTES TABLE (one row per non-NONE vote state)
# ============================================================================
comment_votes_table = Table(
    "comment_votes",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "comment_id",
        UUID(as_uuid=True),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "user_id",
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("vote_type", SmallInteger, nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("comment_id", "user_id", name="unique_comment_vote"),
    CheckConstraint("vote_type IN (-1, 1)", name="valid_vote_type"),
)

Index("idx_comment_votes_user_id", comment_votes_table.c.user_id)

# ============================================================================
# COMMENT_TAGS TABLE
# ============================================================================
comment_tags_table = Table(
    "comment_tags",
    metadata,
    Column(
        "comment_id",
        UUID(as_uuid=True),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("tag_type", String(20), nullable=False),
    Column("tagged_by", BigInteger, nullable=False),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("comment_id", "tag_type", name="unique_comment_tag"),
    CheckConstraint(
        "tag_type IN ('SPOILER', 'WARNING', 'PINNED')", name="valid_tag_type"
    ),
)

# ============================================================================
# RATE_LIMITS TABLE (one row per user, action and bucket)
# ============================================================================
rate_limits_table = Table(
    "rate_limits",
    metadata,
    Column("id", BigInteger, primary_key=True, autoincrement=True),
    Column(
        "user_id",
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("action_type", String(20), nullable=False),
    Column("window_start", TIMESTAMP(timezone=True), nullable=False),
    Column("window_end", TIMESTAMP(timezone=True), nullable=False),
    Column("action_count", Integer, nullable=False, server_default="1"),
    UniqueConstraint(
        "user_id", "action_type", "window_start", name="unique_rate_limit_bucket"
    ),
)

Index(
    "idx_rate_limits_user_action_end",
    rate_limits_table.c.user_id,
    rate_limits_table.c.action_type,
    rate_limits_table.c.window_end,
)
Index("idx_rate_limits_window_end", rate_limits_table.c.window_end)

# ============================================================================
# MODERATION_RECORDS TABLE (append-only)
# ============================================================================
moderation_records_table = Table(
    "moderation_records",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("action", String(30), nullable=False),
    Column("actor_id", BigInteger, nullable=False),
    Column(
        "target_id",
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("reason", Text, nullable=True),
    Column("description", Text, nullable=True),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=True),
    Column("old_role", String(20), nullable=True),
    Column("new_role", String(20), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index(
    "idx_moderation_records_target",
    moderation_records_table.c.target_id,
    moderation_records_table.c.created_at.desc(),
)

# ============================================================================
# COMMENT_REPORTS TABLE
# ============================================================================
comment_reports_table = Table(
    "comment_reports",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "comment_id",
        UUID(as_uuid=True),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "reporter_id",
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("reason", String(100), nullable=False),
    Column("description", String(500), nullable=True),
    Column("status", String(20), nullable=False, server_default="PENDING"),
    Column("reviewed_by", BigInteger, nullable=True),
    Column("reviewed_at", TIMESTAMP(timezone=True), nullable=True),
    Column("review_note", Text, nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("comment_id", "reporter_id", name="unique_comment_report"),
)

Index(
    "idx_comment_reports_status",
    comment_reports_table.c.status,
    comment_reports_table.c.created_at.desc(),
)

# ============================================================================
# AUDIT_LOGS TABLE (append-only)
# ============================================================================
audit_logs_table = Table(
    "audit_logs",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("actor_id", BigInteger, nullable=True),
    Column("action", String(50), nullable=False),
    Column("target_type", String(30), nullable=False),
    Column("target_id", String(64), nullable=False),
    Column("details", JSONB, nullable=False, server_default="{}"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_audit_logs_actor", audit_logs_table.c.actor_id)
Index("idx_audit_logs_action", audit_logs_table.c.action)
Index(
    "idx_audit_logs_target",
    audit_logs_table.c.target_type,
    audit_logs_table.c.target_id,
)
Index("idx_audit_logs_created_at", audit_logs_table.c.created_at.desc())
