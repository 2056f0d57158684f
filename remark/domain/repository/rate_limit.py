"""Rate limit repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from remark.domain.model.rate_limit import RateLimitWindow
from remark.domain.value import ActionType, UserId


class RateLimitRepository(ABC):
    """Repository for rate limit window counters."""

    @abstractmethod
    async def purge_expired(self, now: datetime) -> int:
        """Delete windows that ended before ``now``.

        Args:
            now: Current time

        Returns:
            Number of windows removed
        """
        pass

    @abstractmethod
    async def lock(self, user_id: UserId, action_type: ActionType) -> None:
        """Serialize concurrent check-and-increment for (user, action).

        The lock is held until the surrounding transaction ends.

        Args:
            user_id: The acting user
            action_type: The action being throttled
        """
        pass

    @abstractmethod
    async def find_active(
        self, user_id: UserId, action_type: ActionType, now: datetime
    ) -> List[RateLimitWindow]:
        """Find windows still counting at ``now``.

        Args:
            user_id: The acting user
            action_type: The action being throttled
            now: Current time

        Returns:
            Active windows
        """
        pass

    @abstractmethod
    async def increment(
        self,
        user_id: UserId,
        action_type: ActionType,
        window_start: datetime,
        window_end: datetime,
    ) -> RateLimitWindow:
        """Atomically insert the window with count 1 or add 1 to it.

        Args:
            user_id: The acting user
            action_type: The action being throttled
            window_start: Start of the bucket (part of the key)
            window_end: When the bucket stops counting

        Returns:
            The window after incrementing
        """
        pass
