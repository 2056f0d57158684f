"""Domain layer DI providers."""

from dishka import Scope, provide

from remark.adapter.identity import IdentityClient
from remark.config import (
    CommentSettings,
    ModerationSettings,
    RateLimitSettings,
    ReputationSettings,
)
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
from remark.domain.service import (
    AuditService,
    AuthService,
    CommentService,
    ModerationService,
    RateLimitService,
    ReportService,
    ReputationService,
    UserService,
    VoteService,
)
from remark.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_audit_service(
        self, audit_log_repository: AuditLogRepository
    ) -> AuditService:
        """Provide audit domain service."""
        return AuditService(audit_log_repository=audit_log_repository)

    @provide
    def get_user_service(
        self, user_repository: UserRepository, settings: ModerationSettings
    ) -> UserService:
        """Provide user domain service."""
        return UserService(user_repository=user_repository, settings=settings)

    @provide
    def get_auth_service(
        self, identity_client: IdentityClient, user_service: UserService
    ) -> AuthService:
        """Provide authentication domain service.

        Args:
            identity_client: Identity provider client
            user_service: User domain service

        Returns:
            AuthService verifying credentials against the identity provider
        """
        return AuthService(
            identity_verifier=identity_client, user_service=user_service
        )

    @provide
    def get_moderation_service(
        self,
        user_repository: UserRepository,
        moderation_record_repository: ModerationRecordRepository,
        audit_service: AuditService,
        settings: ModerationSettings,
    ) -> ModerationService:
        """Provide moderation domain service."""
        return ModerationService(
            user_repository=user_repository,
            moderation_record_repository=moderation_record_repository,
            audit_service=audit_service,
            settings=settings,
        )

    @provide
    def get_reputation_service(
        self,
        user_repository: UserRepository,
        comment_repository: CommentRepository,
        settings: ReputationSettings,
    ) -> ReputationService:
        """Provide reputation domain service."""
        return ReputationService(
            user_repository=user_repository,
            comment_repository=comment_repository,
            settings=settings,
        )

    @provide
    def get_rate_limit_service(
        self,
        rate_limit_repository: RateLimitRepository,
        settings: RateLimitSettings,
    ) -> RateLimitService:
        """Provide rate limit domain service."""
        return RateLimitService(
            rate_limit_repository=rate_limit_repository, settings=settings
        )

    @provide
    def get_comment_service(
        self,
        comment_repository: CommentRepository,
        tag_repository: CommentTagRepository,
        moderation_service: ModerationService,
        audit_service: AuditService,
        settings: CommentSettings,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository,
            tag_repository=tag_repository,
            moderation_service=moderation_service,
            audit_service=audit_service,
            settings=settings,
        )

    @provide
    def get_vote_service(
        self,
        vote_repository: VoteRepository,
        comment_repository: CommentRepository,
        reputation_service: ReputationService,
        moderation_service: ModerationService,
        audit_service: AuditService,
    ) -> VoteService:
        """Provide vote domain service."""
        return VoteService(
            vote_repository=vote_repository,
            comment_repository=comment_repository,
            reputation_service=reputation_service,
            moderation_service=moderation_service,
            audit_service=audit_service,
        )

    @provide
    def get_report_service(
        self,
        report_repository: ReportRepository,
        comment_repository: CommentRepository,
        moderation_service: ModerationService,
        audit_service: AuditService,
        settings: CommentSettings,
    ) -> ReportService:
        """Provide report domain service."""
        return ReportService(
            report_repository=report_repository,
            comment_repository=comment_repository,
            moderation_service=moderation_service,
            audit_service=audit_service,
            settings=settings,
        )
