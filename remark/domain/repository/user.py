"""User repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List, Mapping, Optional

from remark.domain.model.user import User
from remark.domain.value import UserId, UserStatus


class UserRepository(ABC):
    """Repository for User aggregate.

    Defines the contract for user persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The provider-issued user ID

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: The user to save

        Returns:
            The saved user
        """
        pass

    @abstractmethod
    async def upsert_identity(self, user: User) -> User:
        """Insert a user, or refresh only the identity columns of an existing one.

        On conflict only username, avatar_url, role, last_active and
        updated_at are written. Moderation state and counters are left as
        stored.

        Args:
            user: The user built from a verified identity

        Returns:
            The stored user
        """
        pass

    @abstractmethod
    async def lock(self, user_id: UserId) -> Optional[User]:
        """Read a user and hold a row lock until the transaction ends.

        Args:
            user_id: The user ID

        Returns:
            The freshly read user, None if the user does not exist
        """
        pass

    @abstractmethod
    async def update_state(
        self, user_id: UserId, values: Mapping[str, Any]
    ) -> Optional[User]:
        """Write only the given columns of a user.

        Args:
            user_id: The user ID
            values: Column values to set

        Returns:
            The updated user, None if the user does not exist
        """
        pass

    @abstractmethod
    async def clear_expired_restrictions(
        self, user_id: UserId, now: datetime
    ) -> tuple[Optional[User], list[str]]:
        """Clear bans, mutes and shadow bans whose expiry is at or before ``now``.

        Each restriction is cleared by a conditional update, so one that was
        extended or reapplied concurrently is left in place.

        Args:
            user_id: The user ID
            now: Current time

        Returns:
            Tuple of (the user after clearing, names of cleared restrictions)
        """
        pass

    @abstractmethod
    async def apply_vote_delta(
        self, user_id: UserId, upvote_change: int, downvote_change: int
    ) -> Optional[User]:
        """Atomically add vote deltas to a user's lifetime totals.

        Totals never drop below zero.

        Args:
            user_id: The comment author's ID
            upvote_change: Change to total_upvotes (-1, 0 or +1)
            downvote_change: Change to total_downvotes (-1, 0 or +1)

        Returns:
            The updated user, None if the user does not exist
        """
        pass

    @abstractmethod
    async def update_rank_score(self, user_id: UserId, rank_score: int) -> None:
        """Persist a recalculated rank score.

        Args:
            user_id: The user ID
            rank_score: New score in [0, 100]
        """
        pass

    @abstractmethod
    async def find_many(
        self,
        status: UserStatus = UserStatus.ALL,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[User]:
        """List users newest first.

        Args:
            status: Moderation status filter
            search: Case-insensitive username substring
            limit: Maximum number of users to return
            offset: Number of users to skip

        Returns:
            Matching users
        """
        pass

    @abstractmethod
    async def count(
        self, status: UserStatus = UserStatus.ALL, search: Optional[str] = None
    ) -> int:
        """Count users matching the same filters as find_many."""
        pass
