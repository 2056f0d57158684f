"""Report domain service."""

from typing import Optional
from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from remark.config import CommentSettings
from remark.domain.error import (
    CommentDeletedError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from remark.domain.model import Report, User
from remark.domain.repository import CommentRepository, ReportRepository
from remark.domain.value import CommentId, Permission, ReportId, ReportStatus
from remark.util.time import utcnow

from .audit_service import AuditService
from .base import Service
from .moderation_service import ModerationService


class ReportService(Service):
    """Domain service for user reports on comments."""

    def __init__(
        self,
        report_repository: ReportRepository,
        comment_repository: CommentRepository,
        moderation_service: ModerationService,
        audit_service: AuditService,
        settings: CommentSettings,
    ) -> None:
        """Initialize report service.

        Args:
            report_repository: Report repository
            comment_repository: Comment repository
            moderation_service: Permission checks
            audit_service: Audit sink
            settings: Report text limits
        """
        self.report_repository = report_repository
        self.comment_repository = comment_repository
        self.moderation_service = moderation_service
        self.audit_service = audit_service
        self.settings = settings

    async def create_report(
        self,
        reporter: User,
        comment_id: CommentId,
        reason: str,
        description: Optional[str] = None,
    ) -> Report:
        """File a report against a comment.

        Args:
            reporter: Reporting user (already through the write gate)
            comment_id: Reported comment
            reason: Short reason
            description: Optional details

        Returns:
            The pending report

        Raises:
            ValidationError: If the text is missing or too long, or the
                reporter wrote the comment
            NotFoundError: If the comment does not exist
            CommentDeletedError: If the comment is deleted
            ConflictError: If the reporter already reported this comment
        """
        with logfire.span(
            "report_service.create_report",
            comment_id=str(comment_id),
            reporter_id=reporter.id,
        ):
            self.moderation_service.require_permission(
                reporter, Permission.REPORT_COMMENT
            )

            reason = (reason or "").strip()
            if not reason:
                raise ValidationError("Report reason is required")
            if len(reason) > self.settings.max_report_reason_length:
                raise ValidationError(
                    "Report reason must be "
                    f"{self.settings.max_report_reason_length} characters or less"
                )
            description = (description or "").strip() or None
            if (
                description
                and len(description) > self.settings.max_report_description_length
            ):
                raise ValidationError(
                    "Report description must be "
                    f"{self.settings.max_report_description_length} characters or less"
                )

            comment = await self.comment_repository.find_by_id(comment_id)
            if not comment:
                raise NotFoundError("Comment", str(comment_id))
            if comment.is_deleted:
                raise CommentDeletedError(str(comment_id))
            if comment.author_id == reporter.id:
                raise ValidationError("Cannot report your own comment")

            existing = await self.report_repository.find_by_comment_and_reporter(
                comment_id, reporter.id
            )
            if existing:
                logfire.warn(
                    "Duplicate report",
                    comment_id=str(comment_id),
                    reporter_id=reporter.id,
                )
                raise ConflictError("You have already reported this comment")

            report = Report(
                id=ReportId(uuid4()),
                comment_id=comment_id,
                reporter_id=reporter.id,
                reason=reason,
                description=description,
                created_at=utcnow(),
            )
            try:
                saved = await self.report_repository.save(report)
            except IntegrityError:
                logfire.warn(
                    "Concurrent duplicate report",
                    comment_id=str(comment_id),
                    reporter_id=reporter.id,
                )
                raise ConflictError("You have already reported this comment")

            await self.audit_service.record(
                reporter.id,
                "REPORT_COMMENT",
                "comment",
                str(comment_id),
                {"report_id": str(saved.id), "reason": reason},
            )
            logfire.info(
                "Comment reported",
                report_id=str(saved.id),
                comment_id=str(comment_id),
                reporter_id=reporter.id,
            )
            return saved

    async def list_reports(
        self,
        actor: User,
        status: Optional[ReportStatus] = ReportStatus.PENDING,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Report], int]:
        """List reports for the moderation queue, newest first.

        Returns:
            Tuple of (reports on this page, total matching reports)
        """
        with logfire.span(
            "report_service.list_reports",
            actor_id=actor.id,
            status=status.value if status else None,
        ):
            self.moderation_service.require_permission(actor, Permission.VIEW_REPORTS)
            reports = await self.report_repository.find_by_status(
                status, limit=limit, offset=offset
            )
            total = await self.report_repository.count_by_status(status)
            return reports, total

    async def review_report(
        self,
        actor: User,
        report_id: ReportId,
        status: ReportStatus,
        note: Optional[str] = None,
    ) -> Report:
        """Record a moderator's decision on a report.

        Raises:
            ValidationError: If the new status is PENDING
            NotFoundError: If the report does not exist
        """
        with logfire.span(
            "report_service.review_report",
            report_id=str(report_id),
            actor_id=actor.id,
            status=status.value,
        ):
            self.moderation_service.require_permission(
                actor, Permission.REVIEW_REPORTS
            )
            if status == ReportStatus.PENDING:
                raise ValidationError("A review must move the report out of PENDING")

            report = await self.report_repository.find_by_id(report_id)
            if not report:
                raise NotFoundError("Report", str(report_id))

            note = (note or "").strip() or None
            if note and len(note) > self.settings.max_report_description_length:
                raise ValidationError(
                    "Review note must be "
                    f"{self.settings.max_report_description_length} characters or less"
                )

            reviewed = await self.report_repository.save(
                report.model_copy(
                    update={
                        "status": status,
                        "reviewed_by": actor.id,
                        "reviewed_at": utcnow(),
                        "review_note": note,
                    }
                )
            )
            await self.audit_service.record(
                actor.id,
                "REVIEW_REPORT",
                "report",
                str(report_id),
                {
                    "comment_id": str(report.comment_id),
                    "previous_status": report.status.value,
                    "status": status.value,
                },
            )
            logfire.info(
                "Report reviewed",
                report_id=str(report_id),
                actor_id=actor.id,
                status=status.value,
            )
            return reviewed
