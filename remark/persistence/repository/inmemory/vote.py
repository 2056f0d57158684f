"""In-memory vote repository for testing."""

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError

from remark.domain.model.vote import DailyVotes, Vote, VoterActivity
from remark.domain.repository.vote import VoteRepository
from remark.domain.value import CommentId, UserId, VoteType


class InMemoryVoteRepository(VoteRepository):
    """In-memory implementation of VoteRepository for testing."""

    def __init__(self) -> None:
        self._votes: dict[tuple[CommentId, UserId], Vote] = {}

    async def find(self, comment_id: CommentId, user_id: UserId) -> Optional[Vote]:
        """Find a user's vote on a comment."""
        return self._votes.get((comment_id, user_id))

    async def save(self, vote: Vote) -> Vote:
        """Insert a vote or change the direction of an existing one.

        Raises:
            IntegrityError: If a different vote row already exists for the
                same (comment, user)
        """
        key = (vote.comment_id, vote.user_id)
        existing = self._votes.get(key)
        if existing and existing.id != vote.id:
            raise IntegrityError("Duplicate vote", None, Exception())

        self._votes[key] = vote
        return vote

    async def delete(self, comment_id: CommentId, user_id: UserId) -> bool:
        """Delete a user's vote on a comment."""
        return self._votes.pop((comment_id, user_id), None) is not None

    async def count_by_comment(self, comment_id: CommentId) -> tuple[int, int]:
        """Count the live votes for a comment."""
        votes = [v for v in self._votes.values() if v.comment_id == comment_id]
        upvotes = sum(1 for v in votes if v.vote_type == VoteType.UP)
        return upvotes, len(votes) - upvotes

    async def find_by_comment(
        self,
        comment_id: CommentId,
        vote_type: Optional[VoteType] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Vote]:
        """List votes on a comment, newest first."""
        votes = [
            v
            for v in self._votes.values()
            if v.comment_id == comment_id
            and (vote_type is None or v.vote_type == vote_type)
        ]
        votes.sort(key=lambda v: v.updated_at, reverse=True)
        return votes[offset : offset + limit]

    async def find_by_user_and_comments(
        self, user_id: UserId, comment_ids: list[CommentId]
    ) -> dict[CommentId, VoteType]:
        """Find a user's votes on multiple comments (batch query)."""
        result: dict[CommentId, VoteType] = {}
        for comment_id in comment_ids:
            vote = self._votes.get((comment_id, user_id))
            if vote:
                result[comment_id] = vote.vote_type
        return result

    async def count_by_type(self) -> tuple[int, int]:
        """Count every live vote."""
        upvotes = sum(1 for v in self._votes.values() if v.vote_type == VoteType.UP)
        return upvotes, len(self._votes) - upvotes

    async def find_top_voters(self, limit: int = 10) -> list[VoterActivity]:
        """List the users holding the most votes."""
        by_user: dict[UserId, VoterActivity] = {}
        for vote in self._votes.values():
            activity = by_user.get(vote.user_id) or VoterActivity(user_id=vote.user_id)
            if vote.vote_type == VoteType.UP:
                activity = activity.model_copy(update={"upvotes": activity.upvotes + 1})
            else:
                activity = activity.model_copy(
                    update={"downvotes": activity.downvotes + 1}
                )
            by_user[vote.user_id] = activity

        voters = sorted(by_user.values(), key=lambda a: (-a.total, a.user_id))
        return voters[:limit]

    async def daily_totals(self, since: datetime) -> list[DailyVotes]:
        """Group recent votes by UTC day."""
        days: dict[date, list[Vote]] = {}
        for vote in self._votes.values():
            if vote.created_at >= since:
                day = vote.created_at.astimezone(timezone.utc).date()
                days.setdefault(day, []).append(vote)

        return [
            DailyVotes(
                day=day,
                upvotes=sum(1 for v in votes if v.vote_type == VoteType.UP),
                downvotes=sum(1 for v in votes if v.vote_type == VoteType.DOWN),
                unique_voters=len({v.user_id for v in votes}),
            )
            for day, votes in sorted(days.items())
        ]
