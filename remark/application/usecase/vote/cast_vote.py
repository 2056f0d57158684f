"""Cast vote use case."""

from uuid import UUID

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import VoteService
from remark.domain.value import ActionType, CommentId, VoteState, VoteType


class CastVoteRequest(BaseModel):
    """Cast vote request."""

    credential: str
    comment_id: str
    vote_type: VoteType  # 1 for up, -1 for down


class CastVoteResponse(BaseModel):
    """Cast vote response."""

    comment_id: str
    user_vote: VoteState
    upvotes: int
    downvotes: int
    total_votes: int


class CastVoteUseCase(BaseUseCase):
    """Use case for toggling a vote on a comment.

    Voting the same way twice removes the vote; voting the other way
    switches it.
    """

    def __init__(self, access_gate: AccessGate, vote_service: VoteService) -> None:
        """Initialize cast vote use case.

        Args:
            access_gate: Caller resolution and write admission
            vote_service: Vote domain service
        """
        self.access_gate = access_gate
        self.vote_service = vote_service

    async def execute(self, request: CastVoteRequest) -> CastVoteResponse:
        """Execute cast vote flow.

        Args:
            request: Cast vote request

        Returns:
            The caller's new vote state and the comment's recomputed counts

        Raises:
            NotFoundError: If the comment does not exist
            CommentDeletedError: If the comment is deleted
            ConflictError: If a concurrent vote by the same user won the race
        """
        voter = await self.access_gate.admit(request.credential, ActionType.VOTE)
        outcome = await self.vote_service.cast_vote(
            voter=voter,
            comment_id=CommentId(UUID(request.comment_id)),
            vote_type=request.vote_type,
        )
        return CastVoteResponse(
            comment_id=str(outcome.comment.id),
            user_vote=outcome.state,
            upvotes=outcome.comment.upvotes,
            downvotes=outcome.comment.downvotes,
            total_votes=outcome.comment.total_votes,
        )
