"""In-memory user repository for testing."""

from datetime import datetime
from typing import Any, Mapping, Optional

from remark.domain.model.user import User
from remark.domain.repository.user import UserRepository
from remark.domain.value import UserId, UserStatus


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return self._users.get(user_id)

    async def save(self, user: User) -> User:
        """Save or update a user.

        Vote totals and rank score are only changed through
        apply_vote_delta and update_rank_score.
        """
        existing = self._users.get(user.id)
        if existing:
            user = user.model_copy(
                update={
                    "total_upvotes": existing.total_upvotes,
                    "total_downvotes": existing.total_downvotes,
                    "rank_score": existing.rank_score,
                    "created_at": existing.created_at,
                }
            )
        self._users[user.id] = user
        return user

    async def upsert_identity(self, user: User) -> User:
        """Insert a user or refresh the identity columns of a stored one."""
        existing = self._users.get(user.id)
        if existing:
            user = existing.model_copy(
                update={
                    k: getattr(user, k)
                    for k in (
                        "username",
                        "avatar_url",
                        "role",
                        "last_active",
                        "updated_at",
                    )
                }
            )
        self._users[user.id] = user
        return user

    async def lock(self, user_id: UserId) -> Optional[User]:
        """Read a user. Nothing to lock in memory."""
        return self._users.get(user_id)

    async def update_state(
        self, user_id: UserId, values: Mapping[str, Any]
    ) -> Optional[User]:
        """Update only the given fields."""
        user = self._users.get(user_id)
        if not user:
            return None
        user = user.model_copy(update=dict(values))
        self._users[user_id] = user
        return user

    async def clear_expired_restrictions(
        self, user_id: UserId, now: datetime
    ) -> tuple[Optional[User], list[str]]:
        """Clear restrictions whose expiry is at or before ``now``."""
        user = self._users.get(user_id)
        if not user:
            return None, []

        updates: dict[str, Any] = {}
        cleared = []
        if user.is_banned and user.ban_expires and user.ban_expires <= now:
            updates.update(is_banned=False, ban_reason=None, ban_expires=None)
            cleared.append("ban")
        if user.is_muted and user.mute_expires and user.mute_expires <= now:
            updates.update(is_muted=False, mute_expires=None)
            cleared.append("mute")
        if (
            user.shadow_banned
            and user.shadow_ban_expires
            and user.shadow_ban_expires <= now
        ):
            updates.update(
                shadow_banned=False, shadow_ban_reason=None, shadow_ban_expires=None
            )
            cleared.append("shadow_ban")

        if updates:
            user = user.model_copy(update={**updates, "updated_at": now})
            self._users[user_id] = user
        return user, cleared

    async def apply_vote_delta(
        self, user_id: UserId, upvote_change: int, downvote_change: int
    ) -> Optional[User]:
        """Add vote deltas, flooring the totals at zero."""
        user = self._users.get(user_id)
        if not user:
            return None
        user = user.model_copy(
            update={
                "total_upvotes": max(user.total_upvotes + upvote_change, 0),
                "total_downvotes": max(user.total_downvotes + downvote_change, 0),
            }
        )
        self._users[user_id] = user
        return user

    async def update_rank_score(self, user_id: UserId, rank_score: int) -> None:
        """Persist a recalculated rank score."""
        user = self._users.get(user_id)
        if user:
            self._users[user_id] = user.model_copy(
                update={"rank_score": min(max(rank_score, 0), 100)}
            )

    async def find_many(
        self,
        status: UserStatus = UserStatus.ALL,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[User]:
        """List users newest first."""
        users = self._filtered(status, search)
        users.sort(key=lambda u: u.created_at, reverse=True)
        return users[offset : offset + limit]

    async def count(
        self, status: UserStatus = UserStatus.ALL, search: Optional[str] = None
    ) -> int:
        """Count users matching the listing filters."""
        return len(self._filtered(status, search))

    def _filtered(self, status: UserStatus, search: Optional[str]) -> list[User]:
        users = list(self._users.values())
        if status == UserStatus.BANNED:
            users = [u for u in users if u.is_banned]
        elif status == UserStatus.SHADOW_BANNED:
            users = [u for u in users if u.shadow_banned]
        elif status == UserStatus.ACTIVE:
            users = [u for u in users if not u.is_banned and not u.shadow_banned]

        if search and search.strip():
            needle = search.strip().lower()
            users = [u for u in users if needle in u.username.lower()]
        return users
