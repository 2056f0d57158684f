"""Review report use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import ReportService
from remark.domain.value import ReportId, ReportStatus

from .common import ReportItem, to_report_item


class ReviewReportRequest(BaseModel):
    """Review report request."""

    credential: str
    report_id: str
    status: ReportStatus
    note: Optional[str] = None


class ReviewReportResponse(ReportItem):
    """Review report response."""

    pass


class ReviewReportUseCase(BaseUseCase):
    """Use case for recording a moderator's decision on a report."""

    def __init__(self, access_gate: AccessGate, report_service: ReportService) -> None:
        """Initialize review report use case.

        Args:
            access_gate: Caller resolution and write admission
            report_service: Report domain service
        """
        self.access_gate = access_gate
        self.report_service = report_service

    async def execute(self, request: ReviewReportRequest) -> ReviewReportResponse:
        """Execute review report flow.

        Reviews are not rate limited but banned moderators are refused.

        Raises:
            PermissionDeniedError: If the caller may not review reports
            ValidationError: If the new status is PENDING
            NotFoundError: If the report does not exist
        """
        actor = await self.access_gate.admit(request.credential, action=None)
        report = await self.report_service.review_report(
            actor=actor,
            report_id=ReportId(UUID(request.report_id)),
            status=request.status,
            note=request.note,
        )
        return ReviewReportResponse(**to_report_item(report).model_dump())
