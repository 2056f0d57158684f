"""Get vote statistics use case."""

from datetime import date

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import VoteService


class TopCommentItem(BaseModel):
    """A comment ranked by votes received."""

    comment_id: str
    author_id: int
    content: str
    upvotes: int
    downvotes: int
    total_votes: int


class TopVoterItem(BaseModel):
    """A user ranked by votes cast."""

    user_id: int
    upvotes: int
    downvotes: int
    total: int


class DailyVotesItem(BaseModel):
    """Votes cast on one UTC day."""

    day: date
    upvotes: int
    downvotes: int
    total: int
    unique_voters: int


class GetVoteStatsRequest(BaseModel):
    """Get vote statistics request."""

    credential: str
    days: int = 7
    limit: int = 10


class GetVoteStatsResponse(BaseModel):
    """Get vote statistics response."""

    upvotes: int
    downvotes: int
    total_votes: int
    live_comments: int
    average_votes_per_comment: float
    top_comments: list[TopCommentItem]
    top_voters: list[TopVoterItem]
    daily: list[DailyVotesItem]
    depth_distribution: dict[int, int]


class GetVoteStatsUseCase(BaseUseCase):
    """Use case for the site-wide voting overview."""

    def __init__(self, access_gate: AccessGate, vote_service: VoteService) -> None:
        self.access_gate = access_gate
        self.vote_service = vote_service

    async def execute(self, request: GetVoteStatsRequest) -> GetVoteStatsResponse:
        """Execute get vote statistics flow.

        Raises:
            PermissionDeniedError: If the caller may not view reports
        """
        viewer = await self.access_gate.authenticate(request.credential)
        stats = await self.vote_service.get_vote_stats(
            viewer,
            days=min(max(request.days, 1), 90),
            limit=min(max(request.limit, 1), 50),
        )

        average = 0.0
        if stats.live_comments:
            average = round(stats.total_votes / stats.live_comments, 2)

        return GetVoteStatsResponse(
            upvotes=stats.upvotes,
            downvotes=stats.downvotes,
            total_votes=stats.total_votes,
            live_comments=stats.live_comments,
            average_votes_per_comment=average,
            top_comments=[
                TopCommentItem(
                    comment_id=str(comment.id),
                    author_id=comment.author_id,
                    content=comment.content,
                    upvotes=comment.upvotes,
                    downvotes=comment.downvotes,
                    total_votes=comment.total_votes,
                )
                for comment in stats.top_comments
            ],
            top_voters=[
                TopVoterItem(
                    user_id=voter.user_id,
                    upvotes=voter.upvotes,
                    downvotes=voter.downvotes,
                    total=voter.total,
                )
                for voter in stats.top_voters
            ],
            daily=[
                DailyVotesItem(
                    day=day.day,
                    upvotes=day.upvotes,
                    downvotes=day.downvotes,
                    total=day.total,
                    unique_voters=day.unique_voters,
                )
                for day in stats.daily
            ],
            depth_distribution=stats.depth_distribution,
        )
