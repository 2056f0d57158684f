"""Vote routes."""

from typing import Optional
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from remark.application.usecase.vote import (
    CastVoteRequest,
    CastVoteResponse,
    CastVoteUseCase,
    GetVotersRequest,
    GetVotersResponse,
    GetVotersUseCase,
    GetVoteStatsRequest,
    GetVoteStatsResponse,
    GetVoteStatsUseCase,
)
from remark.domain.value import VoteType, VoterFilter
from remark.interface.api.credential import bearer_credential, require_credential

router = APIRouter(prefix="/comments", tags=["votes"], route_class=DishkaRoute)
stats_router = APIRouter(prefix="/votes", tags=["votes"], route_class=DishkaRoute)


class CastVoteAPIRequest(BaseModel):
    """API request for voting on a comment."""

    vote_type: VoteType  # 1 for up, -1 for down


@router.post("/{comment_id}/votes", response_model=CastVoteResponse)
async def cast_vote(
    comment_id: UUID,
    request: CastVoteAPIRequest,
    cast_vote_use_case: FromDishka[CastVoteUseCase],
    credential: str = Depends(require_credential),
) -> CastVoteResponse:
    """Vote on a comment.

    Casting the same vote again removes it; casting the opposite vote
    switches it.

    Returns:
        The caller's resulting vote and the comment's fresh counters
    """
    use_case_request = CastVoteRequest(
        credential=credential,
        comment_id=str(comment_id),
        vote_type=request.vote_type,
    )
    return await cast_vote_use_case.execute(use_case_request)


@router.get("/{comment_id}/voters", response_model=GetVotersResponse)
async def get_voters(
    comment_id: UUID,
    get_voters_use_case: FromDishka[GetVotersUseCase],
    filter: VoterFilter = VoterFilter.ALL,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    credential: Optional[str] = Depends(bearer_credential),
) -> GetVotersResponse:
    """Get a comment's vote counts.

    Moderators also receive the list of individual voters.
    """
    request = GetVotersRequest(
        comment_id=str(comment_id),
        filter=filter,
        page=page,
        limit=limit,
        credential=credential,
    )
    return await get_voters_use_case.execute(request)


@stats_router.get("/stats", response_model=GetVoteStatsResponse)
async def get_vote_stats(
    get_vote_stats_use_case: FromDishka[GetVoteStatsUseCase],
    days: int = Query(default=7, ge=1, le=90),
    limit: int = Query(default=10, ge=1, le=50),
    credential: str = Depends(require_credential),
) -> GetVoteStatsResponse:
    """Site-wide voting totals, leaders and daily trend. Moderators only."""
    return await get_vote_stats_use_case.execute(
        GetVoteStatsRequest(credential=credential, days=days, limit=limit)
    )
