"""Report repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from remark.domain.model.report import Report
from remark.domain.value import CommentId, ReportId, ReportStatus, UserId


class ReportRepository(ABC):
    """Repository for comment reports."""

    @abstractmethod
    async def find_by_id(self, report_id: ReportId) -> Optional[Report]:
        """Find a report by ID."""
        pass

    @abstractmethod
    async def find_by_comment_and_reporter(
        self, comment_id: CommentId, reporter_id: UserId
    ) -> Optional[Report]:
        """Find the report a user filed against a comment, if any."""
        pass

    @abstractmethod
    async def save(self, report: Report) -> Report:
        """Save a report (create or update).

        Raises:
            IntegrityError: If the reporter already reported the comment
        """
        pass

    @abstractmethod
    async def find_by_status(
        self, status: Optional[ReportStatus], limit: int = 20, offset: int = 0
    ) -> List[Report]:
        """List reports, newest first, optionally filtered by status."""
        pass

    @abstractmethod
    async def count_by_status(self, status: Optional[ReportStatus]) -> int:
        """Count reports, optionally filtered by status."""
        pass
