"""Rate limit domain service.

Each (user, action) pair has a sliding window split into fixed buckets.
A bucket counts toward the window until ``window_start + window``, so
the budget always covers roughly the trailing window rather than a
calendar hour.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import logfire

from remark.config import RateLimitBudget, RateLimitSettings
from remark.domain.error import RateLimitedError
from remark.domain.repository import RateLimitRepository
from remark.domain.value import ActionType, UserId
from remark.util.time import utcnow

from .base import Service


@dataclass(frozen=True)
class RateLimitStatus:
    """Usage of one action's budget."""

    action: ActionType
    limit: int
    used: int
    window_minutes: int
    reset_at: Optional[datetime]

    @property
    def remaining(self) -> int:
        """Actions left in the current window."""
        return max(self.limit - self.used, 0)


class RateLimitService(Service):
    """Domain service for sliding-window write throttling."""

    def __init__(
        self, rate_limit_repository: RateLimitRepository, settings: RateLimitSettings
    ) -> None:
        """Initialize rate limit service.

        Args:
            rate_limit_repository: Rate limit window repository
            settings: Per-action budgets
        """
        self.rate_limit_repository = rate_limit_repository
        self.settings = settings

    def budget(self, action: ActionType) -> RateLimitBudget:
        """Budget configured for an action."""
        return self.settings.budget_for(action.value)

    def bucket_for(
        self, action: ActionType, now: datetime
    ) -> tuple[datetime, datetime]:
        """Start and end of the bucket ``now`` falls into.

        Returns:
            Tuple of (window_start, window_end)
        """
        window = timedelta(minutes=self.budget(action).window_minutes)
        bucket_seconds = max(
            window.total_seconds() / self.settings.buckets_per_window, 1.0
        )
        timestamp = now.timestamp()
        window_start = datetime.fromtimestamp(
            timestamp - (timestamp % bucket_seconds), tz=timezone.utc
        )
        return window_start, window_start + window

    async def consume(
        self, user_id: UserId, action: ActionType, now: Optional[datetime] = None
    ) -> RateLimitStatus:
        """Count one action against the user's budget.

        Expired windows are purged first. The check and the increment run
        under a per-(user, action) lock so concurrent requests cannot both
        pass on the last slot.

        Args:
            user_id: Acting user
            action: Action being performed
            now: Current time (defaults to now)

        Returns:
            Budget usage after this action

        Raises:
            RateLimitedError: If the budget is already spent
        """
        with logfire.span(
            "rate_limit_service.consume", user_id=user_id, action=action.value
        ):
            now = now or utcnow()
            budget = self.budget(action)

            await self.rate_limit_repository.purge_expired(now)
            await self.rate_limit_repository.lock(user_id, action)
            windows = await self.rate_limit_repository.find_active(
                user_id, action, now
            )
            used = sum(w.action_count for w in windows)
            window_start, window_end = self.bucket_for(action, now)
            reset_at = min((w.window_end for w in windows), default=window_end)

            if used >= budget.limit:
                retry_after = max(math.ceil((reset_at - now).total_seconds()), 1)
                logfire.warn(
                    "Rate limit exceeded",
                    user_id=user_id,
                    action=action.value,
                    used=used,
                    limit=budget.limit,
                    retry_after=retry_after,
                )
                raise RateLimitedError(
                    action.value, budget.limit, budget.window_minutes, retry_after
                )

            await self.rate_limit_repository.increment(
                user_id, action, window_start, window_end
            )
            return RateLimitStatus(
                action=action,
                limit=budget.limit,
                used=used + 1,
                window_minutes=budget.window_minutes,
                reset_at=reset_at,
            )

    async def get_status(
        self, user_id: UserId, now: Optional[datetime] = None
    ) -> list[RateLimitStatus]:
        """Report budget usage for every action type.

        Args:
            user_id: User to report on
            now: Current time (defaults to now)

        Returns:
            One status per action type
        """
        with logfire.span("rate_limit_service.get_status", user_id=user_id):
            now = now or utcnow()
            statuses = []
            for action in ActionType:
                budget = self.budget(action)
                windows = await self.rate_limit_repository.find_active(
                    user_id, action, now
                )
                statuses.append(
                    RateLimitStatus(
                        action=action,
                        limit=budget.limit,
                        used=sum(w.action_count for w in windows),
                        window_minutes=budget.window_minutes,
                        reset_at=min((w.window_end for w in windows), default=None),
                    )
                )
            return statuses
