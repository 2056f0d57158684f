"""User aggregate root.

Users are created the first time an identity is seen and carry the
moderation and reputation state for that identity.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from remark.domain.model.common import DomainModel
from remark.domain.value import DisplayName, Role, UserId
from remark.util.time import utcnow


class User(DomainModel):
    """User aggregate root."""

    id: UserId
    username: DisplayName
    avatar_url: Optional[str] = None
    role: Role = Role.USER

    # Ban state (no expiry = permanent)
    is_banned: bool = False
    ban_reason: Optional[str] = None
    ban_expires: Optional[datetime] = None

    # Shadow ban state (no expiry = permanent)
    shadow_banned: bool = False
    shadow_ban_reason: Optional[str] = None
    shadow_ban_expires: Optional[datetime] = None

    # Mute state
    is_muted: bool = False
    mute_expires: Optional[datetime] = None

    # Warnings: active count resets on escalation, lifetime total never does
    warning_count: int = Field(default=0, ge=0)
    total_warns: int = Field(default=0, ge=0)

    # Lifetime votes received across all of the user's comments
    total_upvotes: int = Field(default=0, ge=0)
    total_downvotes: int = Field(default=0, ge=0)
    rank_score: int = Field(default=0, ge=0, le=100)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    last_active: datetime = Field(default_factory=utcnow)

    @property
    def effective_role(self) -> Role:
        """Role used for permission checks. Active shadow bans suppress elevation."""
        return Role.USER if self.is_shadow_ban_active(utcnow()) else self.role

    @property
    def is_mod(self) -> bool:
        """Legacy flag: MODERATOR or above."""
        return self.role.at_least(Role.MODERATOR)

    @property
    def is_admin(self) -> bool:
        """Legacy flag: ADMIN or above."""
        return self.role.at_least(Role.ADMIN)

    def is_ban_active(self, now: datetime) -> bool:
        """Whether the ban still applies at ``now``."""
        return self.is_banned and (self.ban_expires is None or self.ban_expires > now)

    def is_mute_active(self, now: datetime) -> bool:
        """Whether the mute still applies at ``now``."""
        return self.is_muted and (
            self.mute_expires is None or self.mute_expires > now
        )

    def is_shadow_ban_active(self, now: datetime) -> bool:
        """Whether the shadow ban still applies at ``now``."""
        return self.shadow_banned and (
            self.shadow_ban_expires is None or self.shadow_ban_expires > now
        )
