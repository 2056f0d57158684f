"""Moderation record entity.

Records are append-only; current moderation state lives on the User.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from remark.domain.model.common import DomainModel
from remark.domain.value import ModerationAction, ModerationRecordId, Role, UserId
from remark.util.time import utcnow


class ModerationRecord(DomainModel):
    """A warning, mute, ban, shadow ban, role change or their reversal."""

    id: ModerationRecordId
    action: ModerationAction
    actor_id: UserId
    target_id: UserId
    reason: Optional[str] = None
    description: Optional[str] = None
    expires_at: Optional[datetime] = None

    # Only set for ROLE_CHANGE
    old_role: Optional[Role] = None
    new_role: Optional[Role] = None

    created_at: datetime = Field(default_factory=utcnow)
