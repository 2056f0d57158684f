"""Vote use cases."""

from .cast_vote import CastVoteRequest, CastVoteResponse, CastVoteUseCase
from .get_vote_stats import (
    DailyVotesItem,
    GetVoteStatsRequest,
    GetVoteStatsResponse,
    GetVoteStatsUseCase,
    TopCommentItem,
    TopVoterItem,
)
from .get_voters import GetVotersRequest, GetVotersResponse, GetVotersUseCase, VoterItem

__all__ = [
    "CastVoteRequest",
    "CastVoteResponse",
    "CastVoteUseCase",
    "DailyVotesItem",
    "GetVoteStatsRequest",
    "GetVoteStatsResponse",
    "GetVoteStatsUseCase",
    "GetVotersRequest",
    "GetVotersResponse",
    "GetVotersUseCase",
    "TopCommentItem",
    "TopVoterItem",
    "VoterItem",
]
