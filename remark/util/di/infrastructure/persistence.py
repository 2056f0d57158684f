"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

import logfire
from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from remark.config import Settings
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
from remark.persistence.database import create_engine, create_session_factory
from remark.persistence.repository import (
    PostgresAuditLogRepository,
    PostgresCommentRepository,
    PostgresCommentTagRepository,
    PostgresModerationRecordRepository,
    PostgresRateLimitRepository,
    PostgresReportRepository,
    PostgresUserRepository,
    PostgresVoteRepository,
)
from remark.util.di.base import ProviderBase
from remark.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_engine(self, settings: Settings) -> AsyncEngine:
        """Provide database engine."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        return engine

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        The whole request runs in one transaction: it is committed at the
        end of the request if no exception occurred, and rolled back
        otherwise.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
                logfire.info("Session committed")
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, session: AsyncSession) -> UserRepository:
        """Provide User repository."""
        return PostgresUserRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_comment_repository(self, session: AsyncSession) -> CommentRepository:
        """Provide Comment repository."""
        return PostgresCommentRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_comment_tag_repository(
        self, session: AsyncSession
    ) -> CommentTagRepository:
        """Provide CommentTag repository."""
        return PostgresCommentTagRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_vote_repository(self, session: AsyncSession) -> VoteRepository:
        """Provide Vote repository."""
        return PostgresVoteRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_rate_limit_repository(self, session: AsyncSession) -> RateLimitRepository:
        """Provide RateLimit repository."""
        return PostgresRateLimitRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_moderation_record_repository(
        self, session: AsyncSession
    ) -> ModerationRecordRepository:
        """Provide ModerationRecord repository."""
        return PostgresModerationRecordRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_report_repository(self, session: AsyncSession) -> ReportRepository:
        """Provide Report repository."""
        return PostgresReportRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_audit_log_repository(self, session: AsyncSession) -> AuditLogRepository:
        """Provide AuditLog repository."""
        return PostgresAuditLogRepository(session)
