"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from remark.domain.model import (
    AuditEntry,
    Comment,
    CommentTag,
    EditHistoryEntry,
    ModerationRecord,
    RateLimitWindow,
    Report,
    User,
    Vote,
)
from remark.domain.value import (
    ActionType,
    AuditEntryId,
    CommentId,
    DisplayName,
    MediaId,
    MediaType,
    ModerationAction,
    ModerationRecordId,
    ReportId,
    ReportStatus,
    Role,
    TagType,
    UserId,
    VoteId,
    VoteType,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def _optional_user(value: Any) -> UserId | None:
    return UserId(value) if value is not None else None


def _optional_comment(value: Any) -> CommentId | None:
    return CommentId(_uuid(value)) if value else None


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=UserId(row["id"]),
        username=DisplayName(row["username"]),
        avatar_url=row.get("avatar_url"),
        role=Role(row["role"]),
        is_banned=row["is_banned"],
        ban_reason=row.get("ban_reason"),
        ban_expires=row.get("ban_expires"),
        shadow_banned=row["shadow_banned"],
        shadow_ban_reason=row.get("shadow_ban_reason"),
        shadow_ban_expires=row.get("shadow_ban_expires"),
        is_muted=row["is_muted"],
        mute_expires=row.get("mute_expires"),
        warning_count=row["warning_count"],
        total_warns=row["total_warns"],
        total_upvotes=max(row["total_upvotes"], 0),
        total_downvotes=max(row["total_downvotes"], 0),
        rank_score=min(max(row["rank_score"], 0), 100),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        last_active=row["last_active"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insertion/update
    """
    user_dict = user.model_dump()
    user_dict["role"] = user.role.value
    return user_dict


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model.

    Args:
        row: Database row as dict

    Returns:
        Comment domain model
    """
    return Comment(
        id=CommentId(_uuid(row["id"])),
        media_id=MediaId(row["media_id"]),
        media_type=MediaType(row["media_type"]),
        author_id=UserId(row["author_id"]),
        parent_comment_id=_optional_comment(row.get("parent_comment_id")),
        root_comment_id=_optional_comment(row.get("root_comment_id")),
        depth_level=row["depth_level"],
        content=row["content"],
        upvotes=row["upvotes"],
        downvotes=row["downvotes"],
        total_votes=row["total_votes"],
        is_deleted=row["is_deleted"],
        deleted_by=_optional_user(row.get("deleted_by")),
        delete_reason=row.get("delete_reason"),
        deleted_at=row.get("deleted_at"),
        is_edited=row["is_edited"],
        edit_history=tuple(
            EditHistoryEntry.model_validate(entry)
            for entry in row.get("edit_history") or []
        ),
        is_pinned=row["is_pinned"],
        pin_expires=row.get("pin_expires"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Convert Comment domain model to database dict.

    Edit history is stored as JSON, so its timestamps are serialized.

    Args:
        comment: Comment domain model

    Returns:
        Dict suitable for database insertion/update
    """
    comment_dict = comment.model_dump(exclude={"edit_history"})
    comment_dict["media_type"] = comment.media_type.value
    comment_dict["edit_history"] = [
        entry.model_dump(mode="json") for entry in comment.edit_history
    ]
    return comment_dict


def row_to_comment_tag(row: Dict[str, Any]) -> CommentTag:
    """Convert database row to CommentTag domain model."""
    return CommentTag(
        comment_id=CommentId(_uuid(row["comment_id"])),
        tag_type=TagType(row["tag_type"]),
        tagged_by=UserId(row["tagged_by"]),
        expires_at=row.get("expires_at"),
        created_at=row["created_at"],
    )


def comment_tag_to_dict(tag: CommentTag) -> Dict[str, Any]:
    """Convert CommentTag domain model to database dict."""
    tag_dict = tag.model_dump()
    tag_dict["tag_type"] = tag.tag_type.value
    return tag_dict


def row_to_vote(row: Dict[str, Any]) -> Vote:
    """Convert database row to Vote domain model.

    Args:
        row: Database row as dict

    Returns:
        Vote domain model
    """
    return Vote(
        id=VoteId(_uuid(row["id"])),
        comment_id=CommentId(_uuid(row["comment_id"])),
        user_id=UserId(row["user_id"]),
        vote_type=VoteType(row["vote_type"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def vote_to_dict(vote: Vote) -> Dict[str, Any]:
    """Convert Vote domain model to database dict.

    Args:
        vote: Vote domain model

    Returns:
        Dict suitable for database insertion/update
    """
    vote_dict = vote.model_dump()
    vote_dict["vote_type"] = int(vote.vote_type)
    return vote_dict


def row_to_rate_limit_window(row: Dict[str, Any]) -> RateLimitWindow:
    """Convert database row to RateLimitWindow domain model."""
    return RateLimitWindow(
        user_id=UserId(row["user_id"]),
        action_type=ActionType(row["action_type"]),
        window_start=row["window_start"],
        window_end=row["window_end"],
        action_count=row["action_count"],
    )


def row_to_moderation_record(row: Dict[str, Any]) -> ModerationRecord:
    """Convert database row to ModerationRecord domain model."""
    return ModerationRecord(
        id=ModerationRecordId(_uuid(row["id"])),
        action=ModerationAction(row["action"]),
        actor_id=UserId(row["actor_id"]),
        target_id=UserId(row["target_id"]),
        reason=row.get("reason"),
        description=row.get("description"),
        expires_at=row.get("expires_at"),
        old_role=Role(row["old_role"]) if row.get("old_role") else None,
        new_role=Role(row["new_role"]) if row.get("new_role") else None,
        created_at=row["created_at"],
    )


def moderation_record_to_dict(record: ModerationRecord) -> Dict[str, Any]:
    """Convert ModerationRecord domain model to database dict."""
    record_dict = record.model_dump()
    record_dict["action"] = record.action.value
    record_dict["old_role"] = record.old_role.value if record.old_role else None
    record_dict["new_role"] = record.new_role.value if record.new_role else None
    return record_dict


def row_to_report(row: Dict[str, Any]) -> Report:
    """Convert database row to Report domain model."""
    return Report(
        id=ReportId(_uuid(row["id"])),
        comment_id=CommentId(_uuid(row["comment_id"])),
        reporter_id=UserId(row["reporter_id"]),
        reason=row["reason"],
        description=row.get("description"),
        status=ReportStatus(row["status"]),
        reviewed_by=_optional_user(row.get("reviewed_by")),
        reviewed_at=row.get("reviewed_at"),
        review_note=row.get("review_note"),
        created_at=row["created_at"],
    )


def report_to_dict(report: Report) -> Dict[str, Any]:
    """Convert Report domain model to database dict."""
    report_dict = report.model_dump()
    report_dict["status"] = report.status.value
    return report_dict


def row_to_audit_entry(row: Dict[str, Any]) -> AuditEntry:
    """Convert database row to AuditEntry domain model."""
    return AuditEntry(
        id=AuditEntryId(_uuid(row["id"])),
        actor_id=_optional_user(row.get("actor_id")),
        action=row["action"],
        target_type=row["target_type"],
        target_id=row["target_id"],
        details=row.get("details") or {},
        created_at=row["created_at"],
    )


def audit_entry_to_dict(entry: AuditEntry) -> Dict[str, Any]:
    """Convert AuditEntry domain model to database dict."""
    return entry.model_dump()
