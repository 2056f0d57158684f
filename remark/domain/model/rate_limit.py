"""Rate limit window entity."""

from datetime import datetime

from pydantic import Field

from remark.domain.model.common import DomainModel
from remark.domain.value import ActionType, UserId


class RateLimitWindow(DomainModel):
    """Counter for one bucket of a user's sliding window.

    Keyed by (user_id, action_type, window_start). The bucket counts
    toward the sliding window until ``window_end``.
    """

    user_id: UserId
    action_type: ActionType
    window_start: datetime
    window_end: datetime
    action_count: int = Field(default=0, ge=0)

    def is_active(self, now: datetime) -> bool:
        """Whether this bucket still counts at ``now``."""
        return self.window_end > now
