"""Unit tests for the moderation, report, rate limit and audit use cases."""

import pytest

from remark.application.usecase import (
    audit,
    auth,
    comment,
    moderation,
    rate_limit,
    report,
    vote,
)
from remark.application.usecase.audit import ListAuditLogRequest, ListAuditLogUseCase
from remark.application.usecase.base import BaseUseCase
from remark.application.usecase.comment import (
    CreateCommentRequest,
    CreateCommentUseCase,
)
from remark.application.usecase.moderation import (
    BanUserRequest,
    BanUserUseCase,
    ChangeRoleRequest,
    ChangeRoleUseCase,
    GetModerationHistoryRequest,
    GetModerationHistoryUseCase,
    WarnUserRequest,
    ListUsersRequest,
    ListUsersUseCase,
    WarnUserUseCase,
)
from remark.application.usecase.rate_limit import (
    GetRateLimitStatusRequest,
    GetRateLimitStatusUseCase,
)
from remark.application.usecase.report import (
    CreateReportRequest,
    CreateReportUseCase,
    ListReportsRequest,
    ListReportsUseCase,
    ReviewReportRequest,
    ReviewReportUseCase,
)
from remark.domain.error import BannedError, MutedError, PermissionDeniedError
from remark.domain.repository import UserRepository
from remark.domain.value import ActionType, ModerationAction, ReportStatus, Role
from tests.conftest import add_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()


async def post(unit_env, credential, content):
    use_case = await unit_env.get(CreateCommentUseCase)
    return await use_case.execute(
        CreateCommentRequest(credential=credential, media_id=21, content=content)
    )


class TestWarnUserUseCase:
    """Tests for WarnUserUseCase."""

    @pytest.mark.asyncio
    async def test_three_warnings_mute_the_target(self, unit_env):
        """After the third warning the target can no longer comment."""
        # Arrange
        await post(unit_env, "user-2", "first words")
        warn = await unit_env.get(WarnUserUseCase)

        # Act
        results = []
        for n in range(3):
            results.append(
                await warn.execute(
                    WarnUserRequest(credential="mod-user-1", user_id=2, reason=f"r{n}")
                )
            )

        # Assert
        assert results[1].muted_until is None
        assert results[2].muted_until is not None
        assert results[2].user.is_muted
        assert results[2].user.warning_count == 0
        assert results[2].user.total_warns == 3
        with pytest.raises(MutedError):
            await post(unit_env, "user-2", "let me speak")

    @pytest.mark.asyncio
    async def test_users_cannot_warn(self, unit_env):
        """Plain users lack WARN_USER."""
        await add_user(await unit_env.get(UserRepository), 2)
        warn = await unit_env.get(WarnUserUseCase)

        with pytest.raises(PermissionDeniedError):
            await warn.execute(
                WarnUserRequest(credential="user-1", user_id=2, reason="no")
            )


class TestBanAndRoles:
    """Tests for ban, role change and history use cases."""

    @pytest.mark.asyncio
    async def test_ban_blocks_writes_and_is_recorded(self, unit_env):
        """A banned user cannot post and the ban shows in their history."""
        # Arrange
        user_repo = await unit_env.get(UserRepository)
        await add_user(user_repo, 1, role=Role.ADMIN)
        await add_user(user_repo, 2)
        ban = await unit_env.get(BanUserUseCase)

        # Act
        state = await ban.execute(
            BanUserRequest(credential="user-1", user_id=2, reason="spam")
        )
        history_use_case = await unit_env.get(GetModerationHistoryUseCase)
        history = await history_use_case.execute(
            GetModerationHistoryRequest(credential="user-1", user_id=2)
        )

        # Assert
        assert state.is_banned
        assert state.ban_expires is None
        assert [r.action for r in history.records] == [ModerationAction.BAN]
        with pytest.raises(BannedError):
            await post(unit_env, "user-2", "hello?")

    @pytest.mark.asyncio
    async def test_admin_promotes_moderator(self, unit_env):
        """Admins grant MODERATOR, which survives the next sign-in."""
        # Arrange
        user_repo = await unit_env.get(UserRepository)
        await add_user(user_repo, 1, role=Role.ADMIN)
        await add_user(user_repo, 2)
        change_role = await unit_env.get(ChangeRoleUseCase)

        # Act
        state = await change_role.execute(
            ChangeRoleRequest(
                credential="user-1", user_id=2, role=Role.MODERATOR, reason="helpful"
            )
        )
        warn = await unit_env.get(WarnUserUseCase)
        await add_user(user_repo, 3)
        warned = await warn.execute(
            WarnUserRequest(credential="user-2", user_id=3, reason="rude")
        )

        # Assert
        assert state.role == Role.MODERATOR
        assert warned.user.total_warns == 1


class TestReportUseCases:
    """Tests for the report queue use cases."""

    @pytest.mark.asyncio
    async def test_report_review_flow(self, unit_env):
        """A report is filed, listed and resolved."""
        # Arrange
        comment = await post(unit_env, "user-1", "rude")
        create = await unit_env.get(CreateReportUseCase)
        report = await create.execute(
            CreateReportRequest(
                credential="user-2", comment_id=comment.comment_id, reason="spam"
            )
        )
        list_reports = await unit_env.get(ListReportsUseCase)
        review = await unit_env.get(ReviewReportUseCase)

        # Act
        queue = await list_reports.execute(ListReportsRequest(credential="mod-user-3"))
        reviewed = await review.execute(
            ReviewReportRequest(
                credential="mod-user-3",
                report_id=report.report_id,
                status=ReportStatus.DISMISSED,
            )
        )
        after = await list_reports.execute(ListReportsRequest(credential="mod-user-3"))

        # Assert
        assert [r.report_id for r in queue.reports] == [report.report_id]
        assert queue.total == 1
        assert reviewed.status == ReportStatus.DISMISSED
        assert reviewed.reviewed_by == 3
        assert after.reports == []


class TestRateLimitStatusUseCase:
    """Tests for GetRateLimitStatusUseCase."""

    @pytest.mark.asyncio
    async def test_status_reflects_usage(self, unit_env):
        """Posting counts against the comment budget."""
        await post(unit_env, "user-1", "one")
        await post(unit_env, "user-1", "two")
        status = await unit_env.get(GetRateLimitStatusUseCase)

        result = await status.execute(GetRateLimitStatusRequest(credential="user-1"))

        by_action = {item.action: item for item in result.limits}
        assert by_action[ActionType.COMMENT].used == 2
        assert by_action[ActionType.COMMENT].remaining == 3
        assert by_action[ActionType.COMMENT].window_seconds == 3600
        assert by_action[ActionType.BAN].window_seconds == 24 * 3600


class TestAuditLogUseCase:
    """Tests for ListAuditLogUseCase."""

    @pytest.mark.asyncio
    async def test_admin_reads_filtered_log(self, unit_env):
        """Admins read the log, filtered by action."""
        # Arrange
        comment = await post(unit_env, "user-1", "audited")
        await add_user(await unit_env.get(UserRepository), 9, role=Role.ADMIN)
        audit = await unit_env.get(ListAuditLogUseCase)

        # Act
        result = await audit.execute(
            ListAuditLogRequest(credential="user-9", action="CREATE_COMMENT")
        )

        # Assert
        [entry] = result.entries
        assert entry.actor_id == 1
        assert entry.target_type == "comment"
        assert entry.target_id == comment.comment_id

    @pytest.mark.asyncio
    async def test_moderators_cannot_read_log(self, unit_env):
        """The audit log needs VIEW_AUDIT_LOG."""
        audit = await unit_env.get(ListAuditLogUseCase)

        with pytest.raises(PermissionDeniedError):
            await audit.execute(ListAuditLogRequest(credential="mod-user-1"))


class TestListUsersUseCase:
    """Tests for ListUsersUseCase."""

    @pytest.mark.asyncio
    async def test_pages_report_has_more(self, unit_env):
        """Pages stop reporting more once the total is reached."""
        # Arrange
        user_repo = await unit_env.get(UserRepository)
        await add_user(user_repo, 1, role=Role.MODERATOR)
        for user_id in (2, 3, 4):
            await add_user(user_repo, user_id)
        list_users = await unit_env.get(ListUsersUseCase)

        # Act
        first = await list_users.execute(
            ListUsersRequest(credential="user-1", page=1, limit=3)
        )
        second = await list_users.execute(
            ListUsersRequest(credential="user-1", page=2, limit=3)
        )

        # Assert
        assert first.total == second.total == 4
        assert (len(first.users), first.has_more) == (3, True)
        assert (len(second.users), second.has_more) == (1, False)

    @pytest.mark.asyncio
    async def test_users_cannot_list(self, unit_env):
        """Plain users get PermissionDeniedError."""
        await add_user(await unit_env.get(UserRepository), 1)
        list_users = await unit_env.get(ListUsersUseCase)

        with pytest.raises(PermissionDeniedError):
            await list_users.execute(ListUsersRequest(credential="user-1"))


@pytest.mark.parametrize(
    "package", [audit, auth, comment, moderation, rate_limit, report, vote]
)
def test_every_use_case_extends_base(package):
    """Every exported use case shares the BaseUseCase contract."""
    use_cases = [
        getattr(package, name) for name in package.__all__ if name.endswith("UseCase")
    ]

    assert use_cases
    assert all(issubclass(use_case, BaseUseCase) for use_case in use_cases)
