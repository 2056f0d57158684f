"""PostgreSQL repository implementations."""

from remark.persistence.repository.audit import PostgresAuditLogRepository
from remark.persistence.repository.comment import PostgresCommentRepository
from remark.persistence.repository.moderation import (
    PostgresModerationRecordRepository,
)
from remark.persistence.repository.rate_limit import PostgresRateLimitRepository
from remark.persistence.repository.report import PostgresReportRepository
from remark.persistence.repository.tag import PostgresCommentTagRepository
from remark.persistence.repository.user import PostgresUserRepository
from remark.persistence.repository.vote import PostgresVoteRepository

__all__ = [
    "PostgresUserRepository",
    "PostgresCommentRepository",
    "PostgresCommentTagRepository",
    "PostgresVoteRepository",
    "PostgresRateLimitRepository",
    "PostgresModerationRecordRepository",
    "PostgresReportRepository",
    "PostgresAuditLogRepository",
]
