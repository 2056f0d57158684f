"""In-memory report repository for testing."""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from remark.domain.model.report import Report
from remark.domain.repository.report import ReportRepository
from remark.domain.value import CommentId, ReportId, ReportStatus, UserId


class InMemoryReportRepository(ReportRepository):
    """In-memory implementation of ReportRepository for testing."""

    def __init__(self) -> None:
        self._reports: dict[ReportId, Report] = {}

    async def find_by_id(self, report_id: ReportId) -> Optional[Report]:
        """Find a report by ID."""
        return self._reports.get(report_id)

    async def find_by_comment_and_reporter(
        self, comment_id: CommentId, reporter_id: UserId
    ) -> Optional[Report]:
        """Find the report a user filed against a comment, if any."""
        for report in self._reports.values():
            if report.comment_id == comment_id and report.reporter_id == reporter_id:
                return report
        return None

    async def save(self, report: Report) -> Report:
        """Save a report.

        Raises:
            IntegrityError: If the reporter already reported the comment
        """
        existing = await self.find_by_comment_and_reporter(
            report.comment_id, report.reporter_id
        )
        if existing and existing.id != report.id:
            raise IntegrityError("Duplicate report", None, Exception())

        self._reports[report.id] = report
        return report

    def _filtered(self, status: Optional[ReportStatus]) -> list[Report]:
        return [
            r for r in self._reports.values() if status is None or r.status == status
        ]

    async def find_by_status(
        self, status: Optional[ReportStatus], limit: int = 20, offset: int = 0
    ) -> list[Report]:
        """List reports, newest first, optionally filtered by status."""
        reports = self._filtered(status)
        reports.sort(key=lambda r: r.created_at, reverse=True)
        return reports[offset : offset + limit]

    async def count_by_status(self, status: Optional[ReportStatus]) -> int:
        """Count reports, optionally filtered by status."""
        return len(self._filtered(status))
