"""Providers that bind repositories whose side-effect writes fail."""

from typing import Optional

from dishka import Provider, Scope, provide

from remark.domain.model import AuditEntry, User
from remark.domain.repository import AuditLogRepository, UserRepository
from remark.domain.value import UserId
from remark.persistence.repository.inmemory import (
    InMemoryAuditLogRepository,
    InMemoryUserRepository,
)


class FailingAuditLogRepository(InMemoryAuditLogRepository):
    """Audit store that rejects every append."""

    async def append(self, entry: AuditEntry) -> None:
        raise RuntimeError("audit store unavailable")


class FailingRankUserRepository(InMemoryUserRepository):
    """User store whose vote totals and rank score cannot be written."""

    async def apply_vote_delta(
        self, user_id: UserId, upvote_change: int, downvote_change: int
    ) -> Optional[User]:
        raise RuntimeError("vote totals unavailable")

    async def update_rank_score(self, user_id: UserId, rank_score: int) -> None:
        raise RuntimeError("rank score unavailable")


class FailingAuditLogProvider(Provider):
    """Binds FailingAuditLogRepository over the in-memory audit store."""

    @provide(scope=Scope.APP)
    def get_audit_log_repository(self) -> AuditLogRepository:
        return FailingAuditLogRepository()


class FailingRankProvider(Provider):
    """Binds FailingRankUserRepository over the in-memory user store."""

    @provide(scope=Scope.APP)
    def get_user_repository(self) -> UserRepository:
        return FailingRankUserRepository()
