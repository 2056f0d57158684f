"""List reports use case."""

from typing import Optional

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.config import CommentSettings
from remark.domain.service import ReportService
from remark.domain.value import ReportStatus

from .common import ReportItem, to_report_item


class ListReportsRequest(BaseModel):
    """List reports request."""

    credential: str
    status: Optional[ReportStatus] = ReportStatus.PENDING  # None = any status
    page: int = 1
    limit: Optional[int] = None


class ListReportsResponse(BaseModel):
    """List reports response."""

    reports: list[ReportItem]
    total: int
    page: int
    limit: int
    has_more: bool


class ListReportsUseCase(BaseUseCase):
    """Use case for reading the moderation report queue."""

    def __init__(
        self,
        access_gate: AccessGate,
        report_service: ReportService,
        settings: CommentSettings,
    ) -> None:
        """Initialize list reports use case.

        Args:
            access_gate: Caller resolution
            report_service: Report domain service
            settings: Paging limits
        """
        self.access_gate = access_gate
        self.report_service = report_service
        self.settings = settings

    async def execute(self, request: ListReportsRequest) -> ListReportsResponse:
        """Execute list reports flow.

        Raises:
            PermissionDeniedError: If the caller may not view reports
        """
        actor = await self.access_gate.authenticate(request.credential)
        page = max(request.page, 1)
        limit = request.limit or self.settings.default_page_size
        limit = min(max(limit, 1), self.settings.max_page_size)

        reports, total = await self.report_service.list_reports(
            actor, status=request.status, limit=limit, offset=(page - 1) * limit
        )
        return ListReportsResponse(
            reports=[to_report_item(report) for report in reports],
            total=total,
            page=page,
            limit=limit,
            has_more=page * limit < total,
        )
