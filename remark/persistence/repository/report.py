"""PostgreSQL implementation of Report repository."""

from typing import List, Optional

from sqlalchemy import and_, desc, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from remark.domain.model import Report
from remark.domain.repository import ReportRepository
from remark.domain.value import CommentId, ReportId, ReportStatus, UserId
from remark.persistence.mappers import report_to_dict, row_to_report
from remark.persistence.tables import comment_reports_table


class PostgresReportRepository(ReportRepository):
    """PostgreSQL implementation of ReportRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, report_id: ReportId) -> Optional[Report]:
        """Find a report by ID."""
        stmt = select(comment_reports_table).where(
            comment_reports_table.c.id == report_id
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_report(row._asdict()) if row else None

    async def find_by_comment_and_reporter(
        self, comment_id: CommentId, reporter_id: UserId
    ) -> Optional[Report]:
        """Find the report a user filed against a comment, if any."""
        stmt = select(comment_reports_table).where(
            and_(
                comment_reports_table.c.comment_id == comment_id,
                comment_reports_table.c.reporter_id == reporter_id,
            )
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_report(row._asdict()) if row else None

    async def save(self, report: Report) -> Report:
        """Save a report (create or update).

        New reports are inserted in a savepoint so a duplicate from a
        concurrent request leaves the transaction usable.
        """
        existing = await self.find_by_id(report.id)
        report_dict = report_to_dict(report)

        if existing:
            stmt = (
                comment_reports_table.update()
                .where(comment_reports_table.c.id == report.id)
                .values(**report_dict)
            )
            await self.session.execute(stmt)
        else:
            stmt = insert(comment_reports_table).values(**report_dict)
            async with self.session.begin_nested():
                await self.session.execute(stmt)

        await self.session.flush()
        return report

    async def find_by_status(
        self, status: Optional[ReportStatus], limit: int = 20, offset: int = 0
    ) -> List[Report]:
        """List reports, newest first, optionally filtered by status."""
        stmt = select(comment_reports_table)
        if status is not None:
            stmt = stmt.where(comment_reports_table.c.status == status.value)
        stmt = (
            stmt.order_by(desc(comment_reports_table.c.created_at))
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_report(row._asdict()) for row in result.fetchall()]

    async def count_by_status(self, status: Optional[ReportStatus]) -> int:
        """Count reports, optionally filtered by status."""
        stmt = select(func.count()).select_from(comment_reports_table)
        if status is not None:
            stmt = stmt.where(comment_reports_table.c.status == status.value)
        result = await self.session.execute(stmt)
        return result.scalar() or 0
