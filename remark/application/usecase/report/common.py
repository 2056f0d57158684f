"""Report view shared by the report use cases."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from remark.domain.model import Report
from remark.domain.value import ReportStatus


class ReportItem(BaseModel):
    """A report on a comment."""

    report_id: str
    comment_id: str
    reporter_id: int
    reason: str
    description: Optional[str]
    status: ReportStatus
    reviewed_by: Optional[int]
    reviewed_at: Optional[datetime]
    review_note: Optional[str]
    created_at: datetime


def to_report_item(report: Report) -> ReportItem:
    """Build the view of a report."""
    return ReportItem(
        report_id=str(report.id),
        comment_id=str(report.comment_id),
        reporter_id=report.reporter_id,
        reason=report.reason,
        description=report.description,
        status=report.status,
        reviewed_by=report.reviewed_by,
        reviewed_at=report.reviewed_at,
        review_note=report.review_note,
        created_at=report.created_at,
    )
