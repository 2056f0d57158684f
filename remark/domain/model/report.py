"""Comment report entity."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from remark.domain.model.common import DomainModel
from remark.domain.value import CommentId, ReportId, ReportStatus, UserId
from remark.util.time import utcnow


class Report(DomainModel):
    """A user's report of a comment, unique per (comment, reporter)."""

    id: ReportId
    comment_id: CommentId
    reporter_id: UserId
    reason: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    status: ReportStatus = ReportStatus.PENDING
    reviewed_by: Optional[UserId] = None
    reviewed_at: Optional[datetime] = None
    review_note: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
