"""Unit tests for ReportService."""

import pytest

from remark.domain.error import (
    CommentDeletedError,
    ConflictError,
    PermissionDeniedError,
    ValidationError,
)
from remark.domain.repository import UserRepository
from remark.domain.service import CommentService, ReportService
from remark.domain.value import ReportStatus, Role
from tests.conftest import add_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()


@pytest.fixture
def report_setup(unit_env, media):
    """Create an author, a reporter, a moderator and one comment."""

    async def _setup():
        user_repo = await unit_env.get(UserRepository)
        comment_service = await unit_env.get(CommentService)
        author = await add_user(user_repo, 1)
        reporter = await add_user(user_repo, 2)
        moderator = await add_user(user_repo, 3, role=Role.MODERATOR)
        comment = await comment_service.create_comment(author, media, "rude")
        return author, reporter, moderator, comment

    return _setup


class TestCreateReport:
    """Tests for create_report method."""

    @pytest.mark.asyncio
    async def test_report_starts_pending(self, unit_env, report_setup):
        """New reports enter the queue as PENDING."""
        report_service = await unit_env.get(ReportService)
        _, reporter, _, comment = await report_setup()

        report = await report_service.create_report(
            reporter, comment.id, "harassment", description="  see thread  "
        )

        assert report.status == ReportStatus.PENDING
        assert report.description == "see thread"

    @pytest.mark.asyncio
    async def test_duplicate_report_conflicts(self, unit_env, report_setup):
        """A user reports a comment at most once."""
        report_service = await unit_env.get(ReportService)
        _, reporter, _, comment = await report_setup()
        await report_service.create_report(reporter, comment.id, "spam")

        with pytest.raises(ConflictError):
            await report_service.create_report(reporter, comment.id, "spam again")

    @pytest.mark.asyncio
    async def test_own_comment_cannot_be_reported(self, unit_env, report_setup):
        """Authors cannot report themselves."""
        report_service = await unit_env.get(ReportService)
        author, _, _, comment = await report_setup()

        with pytest.raises(ValidationError):
            await report_service.create_report(author, comment.id, "oops")

    @pytest.mark.asyncio
    async def test_deleted_comment_cannot_be_reported(self, unit_env, report_setup):
        """Deleted comments are out of the report queue."""
        report_service = await unit_env.get(ReportService)
        comment_service = await unit_env.get(CommentService)
        author, reporter, _, comment = await report_setup()
        await comment_service.soft_delete(author, comment.id)

        with pytest.raises(CommentDeletedError):
            await report_service.create_report(reporter, comment.id, "spam")


class TestReviewQueue:
    """Tests for list_reports and review_report."""

    @pytest.mark.asyncio
    async def test_moderator_lists_and_resolves(self, unit_env, report_setup):
        """Resolved reports leave the pending queue."""
        # Arrange
        report_service = await unit_env.get(ReportService)
        _, reporter, moderator, comment = await report_setup()
        report = await report_service.create_report(reporter, comment.id, "spam")

        # Act
        pending, total = await report_service.list_reports(moderator)
        reviewed = await report_service.review_report(
            moderator, report.id, ReportStatus.RESOLVED, note="removed"
        )
        after, after_total = await report_service.list_reports(moderator)
        everything, _ = await report_service.list_reports(moderator, status=None)

        # Assert
        assert [r.id for r in pending] == [report.id]
        assert total == 1
        assert reviewed.status == ReportStatus.RESOLVED
        assert reviewed.reviewed_by == moderator.id
        assert reviewed.review_note == "removed"
        assert after == []
        assert after_total == 0
        assert [r.id for r in everything] == [report.id]

    @pytest.mark.asyncio
    async def test_users_cannot_list_reports(self, unit_env, report_setup):
        """The queue is for moderators."""
        report_service = await unit_env.get(ReportService)
        _, reporter, _, _ = await report_setup()

        with pytest.raises(PermissionDeniedError):
            await report_service.list_reports(reporter)

    @pytest.mark.asyncio
    async def test_review_back_to_pending_is_rejected(self, unit_env, report_setup):
        """A review must move the report out of PENDING."""
        report_service = await unit_env.get(ReportService)
        _, reporter, moderator, comment = await report_setup()
        report = await report_service.create_report(reporter, comment.id, "spam")

        with pytest.raises(ValidationError):
            await report_service.review_report(
                moderator, report.id, ReportStatus.PENDING
            )
