"""Mock persistence providers for testing."""

from dishka import Scope, provide

from remark.domain.repository import (
    AuditLogRepository,
    CommentRepository,
    CommentTagRepository,
    ModerationRecordRepository,
    RateLimitRepository,
    ReportRepository,
    UserRepository,
    VoteRepository,
)
from remark.persistence.repository.inmemory import (
    InMemoryAuditLogRepository,
    InMemoryCommentRepository,
    InMemoryCommentTagRepository,
    InMemoryModerationRecordRepository,
    InMemoryRateLimitRepository,
    InMemoryReportRepository,
    InMemoryUserRepository,
    InMemoryVoteRepository,
)
from remark.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    Repositories live as long as the container. Every test builds its own
    container, so state never leaks between tests, while requests made
    through the API within one test share the same store.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_user_repository(self) -> UserRepository:
        """Provide in-memory user repository."""
        return InMemoryUserRepository()

    @provide(scope=Scope.APP)
    def get_vote_repository(self) -> VoteRepository:
        """Provide in-memory vote repository."""
        return InMemoryVoteRepository()

    @provide(scope=Scope.APP)
    def get_comment_repository(
        self, vote_repository: VoteRepository
    ) -> CommentRepository:
        """Provide in-memory comment repository backed by the vote store."""
        return InMemoryCommentRepository(vote_repository)

    @provide(scope=Scope.APP)
    def get_comment_tag_repository(self) -> CommentTagRepository:
        """Provide in-memory comment tag repository."""
        return InMemoryCommentTagRepository()

    @provide(scope=Scope.APP)
    def get_rate_limit_repository(self) -> RateLimitRepository:
        """Provide in-memory rate limit repository."""
        return InMemoryRateLimitRepository()

    @provide(scope=Scope.APP)
    def get_moderation_record_repository(self) -> ModerationRecordRepository:
        """Provide in-memory moderation record repository."""
        return InMemoryModerationRecordRepository()

    @provide(scope=Scope.APP)
    def get_report_repository(self) -> ReportRepository:
        """Provide in-memory report repository."""
        return InMemoryReportRepository()

    @provide(scope=Scope.APP)
    def get_audit_log_repository(self) -> AuditLogRepository:
        """Provide in-memory audit log repository."""
        return InMemoryAuditLogRepository()
