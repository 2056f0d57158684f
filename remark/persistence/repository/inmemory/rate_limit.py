"""In-memory rate limit repository for testing."""

from datetime import datetime

from remark.domain.model.rate_limit import RateLimitWindow
from remark.domain.repository.rate_limit import RateLimitRepository
from remark.domain.value import ActionType, UserId


class InMemoryRateLimitRepository(RateLimitRepository):
    """In-memory implementation of RateLimitRepository for testing."""

    def __init__(self) -> None:
        self._windows: dict[tuple[UserId, ActionType, datetime], RateLimitWindow] = {}

    async def purge_expired(self, now: datetime) -> int:
        """Delete windows that ended before ``now``."""
        expired = [k for k, w in self._windows.items() if not w.is_active(now)]
        for key in expired:
            del self._windows[key]
        return len(expired)

    async def lock(self, user_id: UserId, action_type: ActionType) -> None:
        """No-op: a single event loop already serializes access."""
        return None

    async def find_active(
        self, user_id: UserId, action_type: ActionType, now: datetime
    ) -> list[RateLimitWindow]:
        """Find windows still counting at ``now``."""
        windows = [
            w
            for w in self._windows.values()
            if w.user_id == user_id
            and w.action_type == action_type
            and w.is_active(now)
        ]
        windows.sort(key=lambda w: w.window_start)
        return windows

    async def increment(
        self,
        user_id: UserId,
        action_type: ActionType,
        window_start: datetime,
        window_end: datetime,
    ) -> RateLimitWindow:
        """Insert the bucket with count 1 or add 1 to it."""
        key = (user_id, action_type, window_start)
        window = self._windows.get(key)
        if window:
            window = window.model_copy(update={"action_count": window.action_count + 1})
        else:
            window = RateLimitWindow(
                user_id=user_id,
                action_type=action_type,
                window_start=window_start,
                window_end=window_end,
                action_count=1,
            )
        self._windows[key] = window
        return window
