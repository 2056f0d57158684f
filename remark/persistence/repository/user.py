"""PostgreSQL implementation of User repository."""

from datetime import datetime
from typing import Any, List, Mapping, Optional

from sqlalchemy import Select, desc, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from remark.domain.model import User
from remark.domain.repository import UserRepository
from remark.domain.value import UserId, UserStatus
from remark.persistence.mappers import row_to_user, user_to_dict
from remark.persistence.tables import users_table

# Columns a sign-in may refresh on an existing user
_IDENTITY_COLUMNS = ("username", "avatar_url", "role", "last_active", "updated_at")


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: User ID to look up

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: User to save

        Returns:
            Saved user
        """
        user_dict = user_to_dict(user)

        # Counters owned by atomic updates are left alone on conflict
        stmt = insert(users_table).values(**user_dict)
        stmt = stmt.on_conflict_do_update(
            index_elements=[users_table.c.id],
            set_={
                k: stmt.excluded[k]
                for k in user_dict
                if k
                not in (
                    "id",
                    "created_at",
                    "total_upvotes",
                    "total_downvotes",
                    "rank_score",
                )
            },
        ).returning(users_table)

        result = await self.session.execute(stmt)
        row = result.mappings().first()
        await self.session.flush()
        return row_to_user(dict(row)) if row else user

    async def upsert_identity(self, user: User) -> User:
        """Insert a user or refresh the identity columns of an existing one.

        Args:
            user: User built from a verified identity

        Returns:
            Stored user
        """
        user_dict = user_to_dict(user)

        stmt = insert(users_table).values(**user_dict)
        stmt = stmt.on_conflict_do_update(
            index_elements=[users_table.c.id],
            set_={k: stmt.excluded[k] for k in _IDENTITY_COLUMNS},
        ).returning(users_table)

        result = await self.session.execute(stmt)
        row = result.mappings().first()
        await self.session.flush()
        return row_to_user(dict(row)) if row else user

    async def lock(self, user_id: UserId) -> Optional[User]:
        """Read a user with SELECT ... FOR UPDATE."""
        stmt = (
            select(users_table).where(users_table.c.id == user_id).with_for_update()
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def update_state(
        self, user_id: UserId, values: Mapping[str, Any]
    ) -> Optional[User]:
        """Update only the given columns.

        Args:
            user_id: User ID
            values: Column values to set

        Returns:
            Updated user, None if the user does not exist
        """
        values = dict(values)
        if "role" in values:
            values["role"] = values["role"].value
        stmt = (
            users_table.update()
            .where(users_table.c.id == user_id)
            .values(**values)
            .returning(users_table)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def clear_expired_restrictions(
        self, user_id: UserId, now: datetime
    ) -> tuple[Optional[User], list[str]]:
        """Clear expired restrictions with one conditional UPDATE each."""
        c = users_table.c
        clears = (
            (
                "ban",
                c.is_banned.is_(True) & (c.ban_expires <= now),
                {"is_banned": False, "ban_reason": None, "ban_expires": None},
            ),
            (
                "mute",
                c.is_muted.is_(True) & (c.mute_expires <= now),
                {"is_muted": False, "mute_expires": None},
            ),
            (
                "shadow_ban",
                c.shadow_banned.is_(True) & (c.shadow_ban_expires <= now),
                {
                    "shadow_banned": False,
                    "shadow_ban_reason": None,
                    "shadow_ban_expires": None,
                },
            ),
        )

        cleared = []
        for name, expired, values in clears:
            stmt = (
                users_table.update()
                .where(c.id == user_id, expired)
                .values(**values, updated_at=now)
            )
            result = await self.session.execute(stmt)
            if result.rowcount:
                cleared.append(name)

        return await self.find_by_id(user_id), cleared

    async def apply_vote_delta(
        self, user_id: UserId, upvote_change: int, downvote_change: int
    ) -> Optional[User]:
        """Atomically add vote deltas, flooring the totals at zero."""
        stmt = (
            users_table.update()
            .where(users_table.c.id == user_id)
            .values(
                total_upvotes=func.greatest(
                    users_table.c.total_upvotes + upvote_change, 0
                ),
                total_downvotes=func.greatest(
                    users_table.c.total_downvotes + downvote_change, 0
                ),
            )
            .returning(users_table)
        )
        # Savepoint so a failure here leaves the vote itself intact
        async with self.session.begin_nested():
            result = await self.session.execute(stmt)
            row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def update_rank_score(self, user_id: UserId, rank_score: int) -> None:
        """Persist a recalculated rank score, clamped to [0, 100]."""
        stmt = (
            users_table.update()
            .where(users_table.c.id == user_id)
            .values(rank_score=min(max(rank_score, 0), 100))
        )
        async with self.session.begin_nested():
            await self.session.execute(stmt)

    async def find_many(
        self,
        status: UserStatus = UserStatus.ALL,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[User]:
        """List users newest first."""
        stmt = _filter_users(select(users_table), status, search)
        stmt = (
            stmt.order_by(desc(users_table.c.created_at)).limit(limit).offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_user(dict(row)) for row in result.mappings().all()]

    async def count(
        self, status: UserStatus = UserStatus.ALL, search: Optional[str] = None
    ) -> int:
        """Count users matching the listing filters."""
        stmt = _filter_users(
            select(func.count()).select_from(users_table), status, search
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0


def _filter_users(stmt: Select, status: UserStatus, search: Optional[str]) -> Select:
    c = users_table.c
    if status == UserStatus.BANNED:
        stmt = stmt.where(c.is_banned.is_(True))
    elif status == UserStatus.SHADOW_BANNED:
        stmt = stmt.where(c.shadow_banned.is_(True))
    elif status == UserStatus.ACTIVE:
        stmt = stmt.where(c.is_banned.is_(False), c.shadow_banned.is_(False))

    if search and search.strip():
        stmt = stmt.where(c.username.icontains(search.strip(), autoescape=True))
    return stmt
