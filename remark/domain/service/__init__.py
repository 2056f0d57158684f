"""Domain services."""

from .audit_service import MODERATION_PREFIX, AuditService
from .auth_service import AuthService, IdentityVerifier
from .base import Service
from .comment_service import CommentPage, CommentService, ThreadNode
from .moderation_service import (
    ROLE_PERMISSIONS,
    ModerationService,
    UserPage,
    WarningOutcome,
    escalate_warning,
)
from .rate_limit_service import RateLimitService, RateLimitStatus
from .report_service import ReportService
from .reputation_service import (
    ReputationService,
    calculate_rank_score,
    wilson_lower_bound,
)
from .user_service import UserService
from .vote_service import (
    VoteOutcome,
    VoterList,
    VoteService,
    VoteStats,
    VoteTransition,
    resolve_transition,
)

__all__ = [
    "MODERATION_PREFIX",
    "ROLE_PERMISSIONS",
    "AuditService",
    "AuthService",
    "CommentPage",
    "CommentService",
    "IdentityVerifier",
    "ModerationService",
    "RateLimitService",
    "RateLimitStatus",
    "ReportService",
    "ReputationService",
    "Service",
    "ThreadNode",
    "UserService",
    "VoteOutcome",
    "VoterList",
    "VoteService",
    "VoteStats",
    "VoteTransition",
    "UserPage",
    "WarningOutcome",
    "calculate_rank_score",
    "escalate_warning",
    "resolve_transition",
    "wilson_lower_bound",
]
