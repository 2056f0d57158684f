"""Vote entity.

A vote row exists only while a user's state on a comment is UP or DOWN.
"""

from datetime import date, datetime

from pydantic import Field

from remark.domain.model.common import DomainModel
from remark.domain.value import CommentId, UserId, VoteId, VoteType
from remark.util.time import utcnow


class Vote(DomainModel):
    """Vote entity, unique per (comment_id, user_id)."""

    id: VoteId
    comment_id: CommentId
    user_id: UserId
    vote_type: VoteType
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class VoterActivity(DomainModel):
    """Votes currently held by one user across all comments."""

    user_id: UserId
    upvotes: int = 0
    downvotes: int = 0

    @property
    def total(self) -> int:
        return self.upvotes + self.downvotes


class DailyVotes(DomainModel):
    """Votes cast on one calendar day (UTC)."""

    day: date
    upvotes: int = 0
    downvotes: int = 0
    unique_voters: int = 0

    @property
    def total(self) -> int:
        return self.upvotes + self.downvotes
