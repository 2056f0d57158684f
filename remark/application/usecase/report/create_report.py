"""Create report use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import ReportService
from remark.domain.value import ActionType, CommentId

from .common import ReportItem, to_report_item


class CreateReportRequest(BaseModel):
    """Create report request."""

    credential: str
    comment_id: str
    reason: str
    description: Optional[str] = None


class CreateReportResponse(ReportItem):
    """Create report response."""

    pass


class CreateReportUseCase(BaseUseCase):
    """Use case for reporting a comment to the moderators."""

    def __init__(self, access_gate: AccessGate, report_service: ReportService) -> None:
        """Initialize create report use case.

        Args:
            access_gate: Caller resolution and write admission
            report_service: Report domain service
        """
        self.access_gate = access_gate
        self.report_service = report_service

    async def execute(self, request: CreateReportRequest) -> CreateReportResponse:
        """Execute create report flow.

        Raises:
            NotFoundError: If the comment does not exist
            CommentDeletedError: If the comment is deleted
            ValidationError: If the reason is invalid or the comment is the
                reporter's own
            ConflictError: If the reporter already reported this comment
        """
        reporter = await self.access_gate.admit(request.credential, ActionType.REPORT)
        report = await self.report_service.create_report(
            reporter=reporter,
            comment_id=CommentId(UUID(request.comment_id)),
            reason=request.reason,
            description=request.description,
        )
        return CreateReportResponse(**to_report_item(report).model_dump())
