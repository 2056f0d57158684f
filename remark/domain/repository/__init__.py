"""Repository interfaces for the remark domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from remark.domain.repository.audit import AuditLogRepository
from remark.domain.repository.comment import CommentRepository
from remark.domain.repository.moderation import ModerationRecordRepository
from remark.domain.repository.rate_limit import RateLimitRepository
from remark.domain.repository.report import ReportRepository
from remark.domain.repository.tag import CommentTagRepository
from remark.domain.repository.user import UserRepository
from remark.domain.repository.vote import VoteRepository

__all__ = [
    "AuditLogRepository",
    "CommentRepository",
    "CommentTagRepository",
    "ModerationRecordRepository",
    "RateLimitRepository",
    "ReportRepository",
    "UserRepository",
    "VoteRepository",
]
