"""Domain value objects for remark."""

from remark.domain.value.identifiers import (
    AuditEntryId,
    CommentId,
    MediaId,
    ModerationRecordId,
    ReportId,
    UserId,
    VoteId,
)
from remark.domain.value.types import (
    ActionType,
    CommentSort,
    DisplayName,
    MediaRef,
    MediaType,
    ModerationAction,
    Permission,
    ReportStatus,
    Role,
    TagType,
    UserStatus,
    VerifiedIdentity,
    VoterFilter,
    VoteState,
    VoteType,
)

__all__ = [
    # Identifiers
    "UserId",
    "MediaId",
    "CommentId",
    "VoteId",
    "ReportId",
    "ModerationRecordId",
    "AuditEntryId",
    # Types
    "ActionType",
    "CommentSort",
    "DisplayName",
    "MediaRef",
    "MediaType",
    "ModerationAction",
    "Permission",
    "ReportStatus",
    "Role",
    "TagType",
    "UserStatus",
    "VerifiedIdentity",
    "VoterFilter",
    "VoteState",
    "VoteType",
]
