"""PostgreSQL implementation of ModerationRecord repository."""

from typing import List

from sqlalchemy import desc, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from remark.domain.model import ModerationRecord
from remark.domain.repository import ModerationRecordRepository
from remark.domain.value import UserId
from remark.persistence.mappers import (
    moderation_record_to_dict,
    row_to_moderation_record,
)
from remark.persistence.tables import moderation_records_table


class PostgresModerationRecordRepository(ModerationRecordRepository):
    """PostgreSQL implementation of ModerationRecordRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def add(self, record: ModerationRecord) -> ModerationRecord:
        """Append a record."""
        stmt = insert(moderation_records_table).values(
            **moderation_record_to_dict(record)
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return record

    async def find_by_target(
        self, target_id: UserId, limit: int = 50, offset: int = 0
    ) -> List[ModerationRecord]:
        """List records about a user, newest first."""
        stmt = (
            select(moderation_records_table)
            .where(moderation_records_table.c.target_id == target_id)
            .order_by(desc(moderation_records_table.c.created_at))
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_moderation_record(row._asdict()) for row in result.fetchall()]
