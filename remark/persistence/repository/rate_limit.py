"""PostgreSQL implementation of RateLimit repository."""

from datetime import datetime
from typing import List

from sqlalchemy import and_, delete, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from remark.domain.model import RateLimitWindow
from remark.domain.repository import RateLimitRepository
from remark.domain.value import ActionType, UserId
from remark.persistence.mappers import row_to_rate_limit_window
from remark.persistence.tables import rate_limits_table


class PostgresRateLimitRepository(RateLimitRepository):
    """PostgreSQL implementation of RateLimitRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def purge_expired(self, now: datetime) -> int:
        """Delete windows that ended before ``now``."""
        stmt = delete(rate_limits_table).where(rate_limits_table.c.window_end <= now)
        result = await self.session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def lock(self, user_id: UserId, action_type: ActionType) -> None:
        """Take a transaction-scoped advisory lock on (user, action)."""
        key = func.hashtext(f"rate_limit:{user_id}:{action_type.value}")
        await self.session.execute(select(func.pg_advisory_xact_lock(key)))

    async def find_active(
        self, user_id: UserId, action_type: ActionType, now: datetime
    ) -> List[RateLimitWindow]:
        """Find windows still counting at ``now``."""
        stmt = (
            select(rate_limits_table)
            .where(
                and_(
                    rate_limits_table.c.user_id == user_id,
                    rate_limits_table.c.action_type == action_type.value,
                    rate_limits_table.c.window_end > now,
                )
            )
            .order_by(rate_limits_table.c.window_start)
        )
        result = await self.session.execute(stmt)
        return [row_to_rate_limit_window(row._asdict()) for row in result.fetchall()]

    async def increment(
        self,
        user_id: UserId,
        action_type: ActionType,
        window_start: datetime,
        window_end: datetime,
    ) -> RateLimitWindow:
        """Insert the bucket with count 1 or add 1 to it, in one statement."""
        stmt = insert(rate_limits_table).values(
            user_id=user_id,
            action_type=action_type.value,
            window_start=window_start,
            window_end=window_end,
            action_count=1,
        )
        stmt = stmt.on_conflict_do_update(
            constraint="unique_rate_limit_bucket",
            set_={"action_count": rate_limits_table.c.action_count + 1},
        ).returning(rate_limits_table)

        result = await self.session.execute(stmt)
        row = result.fetchone()
        await self.session.flush()
        return row_to_rate_limit_window(row._asdict())
