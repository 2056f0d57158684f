"""Report routes."""

from typing import Optional
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from remark.application.usecase.report import (
    CreateReportRequest,
    CreateReportResponse,
    CreateReportUseCase,
    ListReportsRequest,
    ListReportsResponse,
    ListReportsUseCase,
    ReviewReportRequest,
    ReviewReportResponse,
    ReviewReportUseCase,
)
from remark.domain.value import ReportStatus
from remark.interface.api.credential import require_credential

router = APIRouter(tags=["reports"], route_class=DishkaRoute)


class CreateReportAPIRequest(BaseModel):
    """API request for reporting a comment."""

    reason: str
    description: str | None = None


class ReviewReportAPIRequest(BaseModel):
    """API request for reviewing a report."""

    status: ReportStatus
    note: str | None = None


@router.post(
    "/comments/{comment_id}/reports",
    response_model=CreateReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_report(
    comment_id: UUID,
    request: CreateReportAPIRequest,
    create_report_use_case: FromDishka[CreateReportUseCase],
    credential: str = Depends(require_credential),
) -> CreateReportResponse:
    """Report a comment to the moderators. Each user can report a comment once."""
    return await create_report_use_case.execute(
        CreateReportRequest(
            credential=credential,
            comment_id=str(comment_id),
            reason=request.reason,
            description=request.description,
        )
    )


@router.get("/reports", response_model=ListReportsResponse)
async def list_reports(
    list_reports_use_case: FromDishka[ListReportsUseCase],
    report_status: Optional[ReportStatus] = Query(
        default=ReportStatus.PENDING, alias="status"
    ),
    any_status: bool = False,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    credential: str = Depends(require_credential),
) -> ListReportsResponse:
    """List reports for review. Moderators only.

    Args:
        report_status: Only list reports in this status
        any_status: List reports in every status, ignoring ``status``
    """
    return await list_reports_use_case.execute(
        ListReportsRequest(
            credential=credential,
            status=None if any_status else report_status,
            page=page,
            limit=limit,
        )
    )


@router.patch("/reports/{report_id}", response_model=ReviewReportResponse)
async def review_report(
    report_id: UUID,
    request: ReviewReportAPIRequest,
    review_report_use_case: FromDishka[ReviewReportUseCase],
    credential: str = Depends(require_credential),
) -> ReviewReportResponse:
    """Record the outcome of a report review. Moderators only."""
    return await review_report_use_case.execute(
        ReviewReportRequest(
            credential=credential,
            report_id=str(report_id),
            status=request.status,
            note=request.note,
        )
    )
