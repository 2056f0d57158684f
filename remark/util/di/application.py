"""Application layer DI providers."""

from dishka import Scope, provide

from remark.application.usecase.audit import ListAuditLogUseCase
from remark.application.usecase.auth import AuthenticateUseCase, GetCurrentUserUseCase
from remark.application.usecase.base import AccessGate
from remark.application.usecase.comment import (
    CreateCommentUseCase,
    DeleteCommentUseCase,
    EditCommentUseCase,
    GetCommentsUseCase,
    GetThreadUseCase,
    ListTagsUseCase,
    RemoveTagUseCase,
    TagCommentUseCase,
)
from remark.application.usecase.moderation import (
    BanUserUseCase,
    ChangeRoleUseCase,
    ClearWarningsUseCase,
    GetModerationHistoryUseCase,
    LiftBanUseCase,
    LiftShadowBanUseCase,
    ListUsersUseCase,
    ShadowBanUseCase,
    WarnUserUseCase,
)
from remark.application.usecase.rate_limit import GetRateLimitStatusUseCase
from remark.application.usecase.report import (
    CreateReportUseCase,
    ListReportsUseCase,
    ReviewReportUseCase,
)
from remark.application.usecase.vote import (
    CastVoteUseCase,
    GetVotersUseCase,
    GetVoteStatsUseCase,
)
from remark.config import CommentSettings
from remark.domain.service import (
    AuditService,
    AuthService,
    CommentService,
    ModerationService,
    RateLimitService,
    ReportService,
    ReputationService,
    VoteService,
)
from remark.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_access_gate(
        self,
        auth_service: AuthService,
        rate_limit_service: RateLimitService,
        moderation_service: ModerationService,
    ) -> AccessGate:
        """Provide the caller resolution and write admission gate."""
        return AccessGate(
            auth_service=auth_service,
            rate_limit_service=rate_limit_service,
            moderation_service=moderation_service,
        )

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_authenticate_use_case(
        self, auth_service: AuthService
    ) -> AuthenticateUseCase:
        """Provide authenticate use case."""
        return AuthenticateUseCase(auth_service=auth_service)

    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(
        self, auth_service: AuthService
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(auth_service=auth_service)

    # Comment use cases
    @provide(scope=Scope.REQUEST)
    def get_create_comment_use_case(
        self,
        access_gate: AccessGate,
        comment_service: CommentService,
        moderation_service: ModerationService,
        reputation_service: ReputationService,
    ) -> CreateCommentUseCase:
        """Provide create comment use case."""
        return CreateCommentUseCase(
            access_gate=access_gate,
            comment_service=comment_service,
            moderation_service=moderation_service,
            reputation_service=reputation_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_delete_comment_use_case(
        self,
        access_gate: AccessGate,
        comment_service: CommentService,
        reputation_service: ReputationService,
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(
            access_gate=access_gate,
            comment_service=comment_service,
            reputation_service=reputation_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_edit_comment_use_case(
        self, access_gate: AccessGate, comment_service: CommentService
    ) -> EditCommentUseCase:
        """Provide edit comment use case."""
        return EditCommentUseCase(
            access_gate=access_gate, comment_service=comment_service
        )

    @provide(scope=Scope.REQUEST)
    def get_thread_use_case(
        self,
        access_gate: AccessGate,
        comment_service: CommentService,
        vote_service: VoteService,
    ) -> GetThreadUseCase:
        """Provide get thread use case."""
        return GetThreadUseCase(
            access_gate=access_gate,
            comment_service=comment_service,
            vote_service=vote_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_comments_use_case(
        self,
        access_gate: AccessGate,
        comment_service: CommentService,
        vote_service: VoteService,
    ) -> GetCommentsUseCase:
        """Provide get comments use case."""
        return GetCommentsUseCase(
            access_gate=access_gate,
            comment_service=comment_service,
            vote_service=vote_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_tag_comment_use_case(
        self, access_gate: AccessGate, comment_service: CommentService
    ) -> TagCommentUseCase:
        """Provide tag comment use case."""
        return TagCommentUseCase(
            access_gate=access_gate, comment_service=comment_service
        )

    @provide(scope=Scope.REQUEST)
    def get_remove_tag_use_case(
        self, access_gate: AccessGate, comment_service: CommentService
    ) -> RemoveTagUseCase:
        """Provide remove tag use case."""
        return RemoveTagUseCase(
            access_gate=access_gate, comment_service=comment_service
        )

    @provide(scope=Scope.REQUEST)
    def get_list_tags_use_case(
        self, comment_service: CommentService
    ) -> ListTagsUseCase:
        """Provide list tags use case."""
        return ListTagsUseCase(comment_service=comment_service)

    # Vote use cases
    @provide(scope=Scope.REQUEST)
    def get_cast_vote_use_case(
        self, access_gate: AccessGate, vote_service: VoteService
    ) -> CastVoteUseCase:
        """Provide cast vote use case."""
        return CastVoteUseCase(access_gate=access_gate, vote_service=vote_service)

    @provide(scope=Scope.REQUEST)
    def get_voters_use_case(
        self,
        access_gate: AccessGate,
        vote_service: VoteService,
        settings: CommentSettings,
    ) -> GetVotersUseCase:
        """Provide get voters use case."""
        return GetVotersUseCase(
            access_gate=access_gate, vote_service=vote_service, settings=settings
        )

    @provide(scope=Scope.REQUEST)
    def get_vote_stats_use_case(
        self, access_gate: AccessGate, vote_service: VoteService
    ) -> GetVoteStatsUseCase:
        """Provide get vote statistics use case."""
        return GetVoteStatsUseCase(access_gate, vote_service)

    # Moderation use cases
    @provide(scope=Scope.REQUEST)
    def get_warn_user_use_case(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> WarnUserUseCase:
        """Provide warn user use case."""
        return WarnUserUseCase(access_gate, moderation_service)

    @provide(scope=Scope.REQUEST)
    def get_ban_user_use_case(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> BanUserUseCase:
        """Provide ban user use case."""
        return BanUserUseCase(access_gate, moderation_service)

    @provide(scope=Scope.REQUEST)
    def get_lift_ban_use_case(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> LiftBanUseCase:
        """Provide lift ban use case."""
        return LiftBanUseCase(access_gate, moderation_service)

    @provide(scope=Scope.REQUEST)
    def get_shadow_ban_use_case(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> ShadowBanUseCase:
        """Provide shadow ban use case."""
        return ShadowBanUseCase(access_gate, moderation_service)

    @provide(scope=Scope.REQUEST)
    def get_lift_shadow_ban_use_case(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> LiftShadowBanUseCase:
        """Provide lift shadow ban use case."""
        return LiftShadowBanUseCase(access_gate, moderation_service)

    @provide(scope=Scope.REQUEST)
    def get_change_role_use_case(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> ChangeRoleUseCase:
        """Provide change role use case."""
        return ChangeRoleUseCase(access_gate, moderation_service)

    @provide(scope=Scope.REQUEST)
    def get_clear_warnings_use_case(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> ClearWarningsUseCase:
        """Provide clear warnings use case."""
        return ClearWarningsUseCase(access_gate, moderation_service)

    @provide(scope=Scope.REQUEST)
    def get_moderation_history_use_case(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> GetModerationHistoryUseCase:
        """Provide get moderation history use case."""
        return GetModerationHistoryUseCase(access_gate, moderation_service)

    @provide(scope=Scope.REQUEST)
    def get_list_users_use_case(
        self,
        access_gate: AccessGate,
        moderation_service: ModerationService,
        comment_service: CommentService,
    ) -> ListUsersUseCase:
        """Provide list users use case."""
        return ListUsersUseCase(access_gate, moderation_service, comment_service)

    # Report use cases
    @provide(scope=Scope.REQUEST)
    def get_create_report_use_case(
        self, access_gate: AccessGate, report_service: ReportService
    ) -> CreateReportUseCase:
        """Provide create report use case."""
        return CreateReportUseCase(
            access_gate=access_gate, report_service=report_service
        )

    @provide(scope=Scope.REQUEST)
    def get_list_reports_use_case(
        self,
        access_gate: AccessGate,
        report_service: ReportService,
        settings: CommentSettings,
    ) -> ListReportsUseCase:
        """Provide list reports use case."""
        return ListReportsUseCase(
            access_gate=access_gate, report_service=report_service, settings=settings
        )

    @provide(scope=Scope.REQUEST)
    def get_review_report_use_case(
        self, access_gate: AccessGate, report_service: ReportService
    ) -> ReviewReportUseCase:
        """Provide review report use case."""
        return ReviewReportUseCase(
            access_gate=access_gate, report_service=report_service
        )

    # Rate limit use cases
    @provide(scope=Scope.REQUEST)
    def get_rate_limit_status_use_case(
        self, access_gate: AccessGate, rate_limit_service: RateLimitService
    ) -> GetRateLimitStatusUseCase:
        """Provide get rate limit status use case."""
        return GetRateLimitStatusUseCase(
            access_gate=access_gate, rate_limit_service=rate_limit_service
        )

    # Audit use cases
    @provide(scope=Scope.REQUEST)
    def get_list_audit_log_use_case(
        self,
        access_gate: AccessGate,
        audit_service: AuditService,
        moderation_service: ModerationService,
    ) -> ListAuditLogUseCase:
        """Provide list audit log use case."""
        return ListAuditLogUseCase(
            access_gate=access_gate,
            audit_service=audit_service,
            moderation_service=moderation_service,
        )
