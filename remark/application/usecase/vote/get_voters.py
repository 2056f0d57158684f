"""Get voters use case."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.config import CommentSettings
from remark.domain.service import VoteService
from remark.domain.value import CommentId, VoterFilter, VoteState


class VoterItem(BaseModel):
    """A single voter on a comment."""

    user_id: int
    vote: VoteState
    voted_at: datetime


class GetVotersRequest(BaseModel):
    """Get voters request."""

    comment_id: str
    filter: VoterFilter = VoterFilter.ALL
    page: int = 1
    limit: Optional[int] = None
    credential: Optional[str] = None


class GetVotersResponse(BaseModel):
    """Get voters response.

    ``voters`` is None unless the viewer may see who voted.
    """

    comment_id: str
    upvotes: int
    downvotes: int
    total_votes: int
    voters: Optional[list[VoterItem]]
    page: int
    limit: int


class GetVotersUseCase(BaseUseCase):
    """Use case for listing vote counts and voters on a comment."""

    def __init__(
        self,
        access_gate: AccessGate,
        vote_service: VoteService,
        settings: CommentSettings,
    ) -> None:
        """Initialize get voters use case.

        Args:
            access_gate: Caller resolution
            vote_service: Vote domain service
            settings: Voter paging limits
        """
        self.access_gate = access_gate
        self.vote_service = vote_service
        self.settings = settings

    async def execute(self, request: GetVotersRequest) -> GetVotersResponse:
        """Execute get voters flow.

        Raises:
            NotFoundError: If the comment does not exist
        """
        page = max(request.page, 1)
        limit = request.limit or self.settings.default_voters_page_size
        limit = min(max(limit, 1), self.settings.max_voters_page_size)

        viewer = await self.access_gate.identify(request.credential)
        result = await self.vote_service.fetch_voters(
            CommentId(UUID(request.comment_id)),
            viewer=viewer,
            voter_filter=request.filter,
            limit=limit,
            offset=(page - 1) * limit,
        )

        voters = None
        if result.votes is not None:
            voters = [
                VoterItem(
                    user_id=vote.user_id,
                    vote=VoteState.from_vote_type(vote.vote_type),
                    voted_at=vote.updated_at,
                )
                for vote in result.votes
            ]

        return GetVotersResponse(
            comment_id=request.comment_id,
            upvotes=result.upvotes,
            downvotes=result.downvotes,
            total_votes=result.upvotes + result.downvotes,
            voters=voters,
            page=page,
            limit=limit,
        )
