"""In-memory repository implementations for testing."""

from .audit import InMemoryAuditLogRepository
from .comment import InMemoryCommentRepository
from .moderation import InMemoryModerationRecordRepository
from .rate_limit import InMemoryRateLimitRepository
from .report import InMemoryReportRepository
from .tag import InMemoryCommentTagRepository
from .user import InMemoryUserRepository
from .vote import InMemoryVoteRepository

__all__ = [
    "InMemoryAuditLogRepository",
    "InMemoryCommentRepository",
    "InMemoryCommentTagRepository",
    "InMemoryModerationRecordRepository",
    "InMemoryRateLimitRepository",
    "InMemoryReportRepository",
    "InMemoryUserRepository",
    "InMemoryVoteRepository",
]
