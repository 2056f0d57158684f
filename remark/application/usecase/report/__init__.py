"""Report use cases."""

from .common import ReportItem
from .create_report import (
    CreateReportRequest,
    CreateReportResponse,
    CreateReportUseCase,
)
from .list_reports import ListReportsRequest, ListReportsResponse, ListReportsUseCase
from .review_report import (
    ReviewReportRequest,
    ReviewReportResponse,
    ReviewReportUseCase,
)

__all__ = [
    "CreateReportRequest",
    "CreateReportResponse",
    "CreateReportUseCase",
    "ListReportsRequest",
    "ListReportsResponse",
    "ListReportsUseCase",
    "ReportItem",
    "ReviewReportRequest",
    "ReviewReportResponse",
    "ReviewReportUseCase",
]
