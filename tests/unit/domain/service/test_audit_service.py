"""Unit tests for AuditService."""

import pytest

from remark.domain.repository import (
    AuditLogRepository,
    ModerationRecordRepository,
    UserRepository,
)
from remark.domain.service import AuditService, CommentService, ModerationService
from remark.domain.value import ModerationAction, Role, UserId
from tests.conftest import add_user
from tests.di.failing import FailingAuditLogProvider
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()

# Every audit append fails
failing_audit_env = create_env_fixture(overrides=[FailingAuditLogProvider()])


class TestRecord:
    """Tests for record and record_moderation."""

    @pytest.mark.asyncio
    async def test_moderation_entries_are_prefixed(self, unit_env):
        """Moderation actions are stored with the MODERATION_ prefix."""
        # Arrange
        audit_service = await unit_env.get(AuditService)
        audit_repo = await unit_env.get(AuditLogRepository)

        # Act
        await audit_service.record_moderation(UserId(1), "BAN_USER", UserId(2))

        # Assert
        entries = await audit_repo.find()
        assert [e.action for e in entries] == ["MODERATION_BAN_USER"]
        assert entries[0].target_type == "user"
        assert entries[0].target_id == "2"

    @pytest.mark.asyncio
    async def test_store_failure_is_swallowed(self, failing_audit_env):
        """A failing audit store does not raise."""
        audit_service = await failing_audit_env.get(AuditService)

        await audit_service.record(UserId(1), "VOTE", "comment", "abc")


class TestPrimaryWriteSurvives:
    """Operations complete when their audit entry cannot be written."""

    @pytest.mark.asyncio
    async def test_ban_is_applied(self, failing_audit_env):
        """The ban and its moderation record are stored."""
        # Arrange
        moderation_service = await failing_audit_env.get(ModerationService)
        user_repo = await failing_audit_env.get(UserRepository)
        record_repo = await failing_audit_env.get(ModerationRecordRepository)
        admin = await add_user(user_repo, 1, role=Role.ADMIN)
        target = await add_user(user_repo, 2)

        # Act
        user = await moderation_service.ban_user(admin, target.id, "spam")

        # Assert
        assert user.is_banned
        assert (await user_repo.find_by_id(target.id)).is_banned
        records = await record_repo.find_by_target(target.id)
        assert [r.action for r in records] == [ModerationAction.BAN]

    @pytest.mark.asyncio
    async def test_comment_delete_is_applied(self, failing_audit_env, media):
        """A soft delete is stored."""
        # Arrange
        comment_service = await failing_audit_env.get(CommentService)
        author = await add_user(await failing_audit_env.get(UserRepository), 1)
        comment = await comment_service.create_comment(author, media, "bye")

        # Act
        deleted = await comment_service.soft_delete(author, comment.id)

        # Assert
        assert deleted.is_deleted
