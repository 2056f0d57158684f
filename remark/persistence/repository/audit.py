"""PostgreSQL implementation of AuditLog repository."""

from typing import List, Optional

from sqlalchemy import desc, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from remark.domain.model import AuditEntry
from remark.domain.repository import AuditLogRepository
from remark.domain.value import UserId
from remark.persistence.mappers import audit_entry_to_dict, row_to_audit_entry
from remark.persistence.tables import audit_logs_table


class PostgresAuditLogRepository(AuditLogRepository):
    """PostgreSQL implementation of AuditLogRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def append(self, entry: AuditEntry) -> None:
        """Append an entry inside a savepoint.

        A failed insert rolls back only the savepoint, never the operation
        being audited.
        """
        stmt = insert(audit_logs_table).values(**audit_entry_to_dict(entry))
        async with self.session.begin_nested():
            await self.session.execute(stmt)

    async def find(
        self,
        actor_id: Optional[UserId] = None,
        action: Optional[str] = None,
        target_type: Optional[str] = None,
        target_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[AuditEntry]:
        """List entries newest first with optional filters."""
        stmt = select(audit_logs_table)
        if actor_id is not None:
            stmt = stmt.where(audit_logs_table.c.actor_id == actor_id)
        if action:
            stmt = stmt.where(audit_logs_table.c.action == action)
        if target_type:
            stmt = stmt.where(audit_logs_table.c.target_type == target_type)
        if target_id:
            stmt = stmt.where(audit_logs_table.c.target_id == target_id)
        stmt = (
            stmt.order_by(desc(audit_logs_table.c.created_at))
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_audit_entry(row._asdict()) for row in result.fetchall()]
