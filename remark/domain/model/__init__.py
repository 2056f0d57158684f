"""Domain models for remark."""

from remark.domain.model.audit import AuditEntry
from remark.domain.model.comment import (
    DELETED_MARKER,
    Comment,
    CommentTag,
    EditHistoryEntry,
)
from remark.domain.model.common import DomainModel
from remark.domain.model.moderation import ModerationRecord
from remark.domain.model.rate_limit import RateLimitWindow
from remark.domain.model.report import Report
from remark.domain.model.user import User
from remark.domain.model.vote import DailyVotes, Vote, VoterActivity

__all__ = [
    "DELETED_MARKER",
    "AuditEntry",
    "Comment",
    "CommentTag",
    "DailyVotes",
    "DomainModel",
    "EditHistoryEntry",
    "ModerationRecord",
    "RateLimitWindow",
    "Report",
    "User",
    "Vote",
    "VoterActivity",
]
