"""Domain value objects for remark.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum, IntEnum
from typing import Optional

from pydantic import field_validator

from remark.domain.value.common import RootValueObject, ValueObject
from remark.domain.value.identifiers import MediaId


class Role(str, Enum):
    """User role.

    Roles are totally ordered by privilege. Compare them with ``rank``
    rather than ``<``, which would compare the string values.
    """

    USER = "USER"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"

    @property
    def rank(self) -> int:
        """Position in the privilege order (USER is 0)."""
        return _ROLE_RANK[self]

    def outranks(self, other: "Role") -> bool:
        """Whether this role is strictly more privileged than ``other``."""
        return self.rank > other.rank

    def at_least(self, other: "Role") -> bool:
        """Whether this role is as privileged as ``other`` or more."""
        return self.rank >= other.rank


_ROLE_RANK = {
    Role.USER: 0,
    Role.MODERATOR: 1,
    Role.ADMIN: 2,
    Role.SUPER_ADMIN: 3,
}


class Permission(str, Enum):
    """Actions gated by role."""

    READ_COMMENTS = "read_comments"
    CREATE_COMMENT = "create_comment"
    EDIT_OWN_COMMENT = "edit_own_comment"
    DELETE_OWN_COMMENT = "delete_own_comment"
    DELETE_ANY_COMMENT = "delete_any_comment"
    VOTE = "vote"
    REPORT_COMMENT = "report_comment"
    TAG_COMMENT = "tag_comment"
    VIEW_VOTES = "view_votes"
    VIEW_REPORTS = "view_reports"
    REVIEW_REPORTS = "review_reports"
    WARN_USER = "warn_user"
    BAN_USER = "ban_user"
    SHADOW_BAN_USER = "shadow_ban_user"
    CHANGE_ROLE = "change_role"
    VIEW_AUDIT_LOG = "view_audit_log"


class VoteType(IntEnum):
    """Requested vote direction, stored as +1/-1."""

    UP = 1
    DOWN = -1


class VoteState(str, Enum):
    """A user's vote state on a comment. NONE means no vote row exists."""

    NONE = "none"
    UP = "up"
    DOWN = "down"

    @classmethod
    def from_vote_type(cls, vote_type: Optional[VoteType]) -> "VoteState":
        """Map a stored vote type (or its absence) to a state."""
        if vote_type is None:
            return cls.NONE
        return cls.UP if vote_type == VoteType.UP else cls.DOWN


class VoterFilter(str, Enum):
    """Which voters to list for a comment."""

    UP = "up"
    DOWN = "down"
    ALL = "all"


class UserStatus(str, Enum):
    """Moderation status filter for user listings."""

    ALL = "ALL"
    ACTIVE = "ACTIVE"
    BANNED = "BANNED"
    SHADOW_BANNED = "SHADOW_BANNED"


class MediaType(str, Enum):
    """Kind of media a comment thread belongs to."""

    ANIME = "ANIME"
    MANGA = "MANGA"


class CommentSort(str, Enum):
    """Ordering of top-level comments."""

    NEWEST = "newest"
    OLDEST = "oldest"
    TOP = "top"


class TagType(str, Enum):
    """Moderation tag applied to a comment."""

    SPOILER = "SPOILER"
    WARNING = "WARNING"
    PINNED = "PINNED"


class ActionType(str, Enum):
    """Rate-limited write action."""

    COMMENT = "comment"
    VOTE = "vote"
    DELETE = "delete"
    EDIT = "edit"
    REPORT = "report"
    WARN = "warn"
    BAN = "ban"
    TAG = "tag"


class ReportStatus(str, Enum):
    """Lifecycle of a comment report."""

    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    RESOLVED = "RESOLVED"
    DISMISSED = "DISMISSED"


class ModerationAction(str, Enum):
    """Kind of moderation record."""

    WARNING = "WARNING"
    MUTE = "MUTE"
    BAN = "BAN"
    UNBAN = "UNBAN"
    SHADOW_BAN = "SHADOW_BAN"
    LIFT_SHADOW_BAN = "LIFT_SHADOW_BAN"
    ROLE_CHANGE = "ROLE_CHANGE"
    CLEAR_WARNINGS = "CLEAR_WARNINGS"


class DisplayName(RootValueObject[str]):
    """Display name taken from the identity provider, 1-50 characters."""

    @field_validator("root")
    @classmethod
    def validate_display_name(cls, v: str) -> str:
        """Validate display name length."""
        if len(v) < 1 or len(v) > 50:
            raise ValueError("Display name must be 1-50 characters")
        return v


class MediaRef(ValueObject):
    """Media item a comment thread hangs off."""

    media_id: MediaId
    media_type: MediaType = MediaType.ANIME


class VerifiedIdentity(ValueObject):
    """Identity returned by the identity provider for a valid credential."""

    external_id: int
    display_name: str
    avatar_url: str | None = None
    is_provider_moderator: bool = False
