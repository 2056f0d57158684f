"""Vote domain service.

A user's vote on a comment is a three-state toggle: NONE, UP or DOWN.
Repeating the current direction clears the vote; the opposite direction
switches it in one step. After every transition the comment's counters
are recomputed from the vote rows themselves.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from remark.domain.error import CommentDeletedError, ConflictError, NotFoundError
from remark.domain.model import Comment, DailyVotes, User, Vote, VoterActivity
from remark.domain.repository import CommentRepository, VoteRepository
from remark.domain.value import (
    CommentId,
    Permission,
    UserId,
    VoteId,
    VoterFilter,
    VoteState,
    VoteType,
)
from remark.util.time import utcnow

from .audit_service import AuditService
from .base import Service
from .moderation_service import ModerationService
from .reputation_service import ReputationService


@dataclass(frozen=True)
class VoteTransition:
    """One edge of the vote state machine."""

    before: VoteState
    after: VoteState
    # insert, update or delete
    operation: str
    upvote_change: int
    downvote_change: int


_TRANSITIONS: dict[tuple[VoteState, VoteType], VoteTransition] = {
    (VoteState.NONE, VoteType.UP): VoteTransition(
        VoteState.NONE, VoteState.UP, "insert", 1, 0
    ),
    (VoteState.NONE, VoteType.DOWN): VoteTransition(
        VoteState.NONE, VoteState.DOWN, "insert", 0, 1
    ),
    (VoteState.UP, VoteType.UP): VoteTransition(
        VoteState.UP, VoteState.NONE, "delete", -1, 0
    ),
    (VoteState.UP, VoteType.DOWN): VoteTransition(
        VoteState.UP, VoteState.DOWN, "update", -1, 1
    ),
    (VoteState.DOWN, VoteType.UP): VoteTransition(
        VoteState.DOWN, VoteState.UP, "update", 1, -1
    ),
    (VoteState.DOWN, VoteType.DOWN): VoteTransition(
        VoteState.DOWN, VoteState.NONE, "delete", 0, -1
    ),
}


def resolve_transition(current: VoteState, requested: VoteType) -> VoteTransition:
    """Look up the transition for a requested vote from the current state."""
    return _TRANSITIONS[(current, requested)]


@dataclass(frozen=True)
class VoteOutcome:
    """Result of casting a vote."""

    comment: Comment
    transition: VoteTransition

    @property
    def state(self) -> VoteState:
        """The voter's state after the transition."""
        return self.transition.after


@dataclass(frozen=True)
class VoterList:
    """Vote counts on a comment, plus the voters when the viewer may see them."""

    upvotes: int
    downvotes: int
    votes: Optional[list[Vote]]


@dataclass(frozen=True)
class VoteStats:
    """Site-wide voting activity."""

    upvotes: int
    downvotes: int
    live_comments: int
    top_comments: list[Comment]
    top_voters: list[VoterActivity]
    daily: list[DailyVotes]
    depth_distribution: dict[int, int]

    @property
    def total_votes(self) -> int:
        return self.upvotes + self.downvotes


class VoteService(Service):
    """Domain service for vote operations."""

    def __init__(
        self,
        vote_repository: VoteRepository,
        comment_repository: CommentRepository,
        reputation_service: ReputationService,
        moderation_service: ModerationService,
        audit_service: AuditService,
    ) -> None:
        """Initialize vote service.

        Args:
            vote_repository: Vote repository
            comment_repository: Comment repository (aggregate refresh)
            reputation_service: Author reputation updates
            moderation_service: Permission checks
            audit_service: Audit sink
        """
        self.vote_repository = vote_repository
        self.comment_repository = comment_repository
        self.reputation_service = reputation_service
        self.moderation_service = moderation_service
        self.audit_service = audit_service

    async def cast_vote(
        self, voter: User, comment_id: CommentId, vote_type: VoteType
    ) -> VoteOutcome:
        """Apply a toggle vote.

        Authors may vote on their own comments.

        Args:
            voter: Voting user (already through the write gate)
            comment_id: Comment to vote on
            vote_type: Requested direction

        Returns:
            The comment with recomputed counters and the transition taken

        Raises:
            NotFoundError: If the comment does not exist
            CommentDeletedError: If the comment is deleted
            ConflictError: If a concurrent request created the same vote
        """
        with logfire.span(
            "vote_service.cast_vote",
            comment_id=str(comment_id),
            voter_id=voter.id,
            vote_type=vote_type.name,
        ):
            self.moderation_service.require_permission(voter, Permission.VOTE)

            comment = await self.comment_repository.lock(comment_id)
            if not comment:
                logfire.warn("Vote on non-existent comment", comment_id=str(comment_id))
                raise NotFoundError("Comment", str(comment_id))
            if comment.is_deleted:
                logfire.warn("Vote on deleted comment", comment_id=str(comment_id))
                raise CommentDeletedError(str(comment_id))

            existing = await self.vote_repository.find(comment_id, voter.id)
            current = VoteState.from_vote_type(existing.vote_type if existing else None)
            transition = resolve_transition(current, vote_type)

            now = utcnow()
            if transition.operation == "insert":
                vote = Vote(
                    id=VoteId(uuid4()),
                    comment_id=comment_id,
                    user_id=voter.id,
                    vote_type=vote_type,
                    created_at=now,
                    updated_at=now,
                )
                try:
                    await self.vote_repository.save(vote)
                except IntegrityError:
                    logfire.warn(
                        "Concurrent duplicate vote",
                        comment_id=str(comment_id),
                        voter_id=voter.id,
                    )
                    raise ConflictError("Vote changed concurrently, please retry")
            elif transition.operation == "update":
                await self.vote_repository.save(
                    existing.model_copy(
                        update={"vote_type": vote_type, "updated_at": now}
                    )
                )
            else:
                removed = await self.vote_repository.delete(comment_id, voter.id)
                if not removed:
                    # Already removed by a concurrent request
                    transition = VoteTransition(
                        current, VoteState.NONE, "delete", 0, 0
                    )

            refreshed = await self.comment_repository.refresh_vote_totals(comment_id)

            await self.reputation_service.record_vote_delta(
                comment.author_id,
                transition.upvote_change,
                transition.downvote_change,
            )
            await self.audit_service.record(
                voter.id,
                "VOTE",
                "comment",
                str(comment_id),
                {
                    "vote_type": int(vote_type),
                    "previous_state": transition.before.value,
                    "new_state": transition.after.value,
                },
            )
            logfire.info(
                "Vote cast",
                comment_id=str(comment_id),
                voter_id=voter.id,
                before=transition.before.value,
                after=transition.after.value,
                upvotes=refreshed.upvotes if refreshed else None,
                downvotes=refreshed.downvotes if refreshed else None,
            )
            return VoteOutcome(comment=refreshed or comment, transition=transition)

    async def fetch_voters(
        self,
        comment_id: CommentId,
        viewer: Optional[User] = None,
        voter_filter: VoterFilter = VoterFilter.ALL,
        limit: int = 50,
        offset: int = 0,
    ) -> VoterList:
        """Vote counts on a comment, and who voted for viewers with VIEW_VOTES.

        Raises:
            NotFoundError: If the comment does not exist
        """
        with logfire.span(
            "vote_service.fetch_voters",
            comment_id=str(comment_id),
            filter=voter_filter.value,
        ):
            comment = await self.comment_repository.find_by_id(comment_id)
            if not comment:
                raise NotFoundError("Comment", str(comment_id))

            upvotes, downvotes = await self.vote_repository.count_by_comment(
                comment_id
            )
            if viewer is None or not self.moderation_service.has_permission(
                viewer, Permission.VIEW_VOTES
            ):
                return VoterList(upvotes=upvotes, downvotes=downvotes, votes=None)

            vote_type = {
                VoterFilter.UP: VoteType.UP,
                VoterFilter.DOWN: VoteType.DOWN,
            }.get(voter_filter)
            votes = await self.vote_repository.find_by_comment(
                comment_id, vote_type=vote_type, limit=limit, offset=offset
            )
            return VoterList(upvotes=upvotes, downvotes=downvotes, votes=votes)

    async def get_user_votes(
        self, user_id: UserId, comment_ids: list[CommentId]
    ) -> dict[CommentId, VoteState]:
        """Map each comment to the user's vote state on it.

        Args:
            user_id: Viewing user
            comment_ids: Comments to look up

        Returns:
            Vote state per comment ID (NONE where the user has not voted)
        """
        if not comment_ids:
            return {}

        # One batch query for the whole page
        votes = await self.vote_repository.find_by_user_and_comments(
            user_id, comment_ids
        )
        return {cid: VoteState.from_vote_type(votes.get(cid)) for cid in comment_ids}

    async def get_vote_stats(
        self,
        viewer: User,
        days: int = 7,
        limit: int = 10,
        now: Optional[datetime] = None,
    ) -> VoteStats:
        """Voting totals, leaders, daily trend and comment depth spread.

        Args:
            viewer: Viewing moderator
            days: Length of the daily trend
            limit: Size of the top comment and top voter lists
            now: Current time (defaults to now)

        Raises:
            PermissionDeniedError: If the viewer may not view reports
        """
        with logfire.span("vote_service.get_vote_stats", viewer_id=viewer.id):
            self.moderation_service.require_permission(viewer, Permission.VIEW_REPORTS)
            now = now or utcnow()

            upvotes, downvotes = await self.vote_repository.count_by_type()
            return VoteStats(
                upvotes=upvotes,
                downvotes=downvotes,
                live_comments=await self.comment_repository.count_live(),
                top_comments=await self.comment_repository.find_most_voted(limit),
                top_voters=await self.vote_repository.find_top_voters(limit),
                daily=await self.vote_repository.daily_totals(
                    now - timedelta(days=days)
                ),
                depth_distribution=(
                    await self.comment_repository.depth_distribution()
                ),
            )
