"""Reputation domain service.

A user's rank score is a pure function of the votes their comments have
received and how many comments they have written:

    quality       = Wilson lower bound of upvotes / (upvotes + downvotes)
    participation = log10(comment_count + 1) / divisor
    rank          = floor(quality ** exponent * participation * 100)

clamped to [0, 100]. The score is advisory and never used for
authorization.
"""

import math
from typing import Optional

import logfire

from remark.config import ReputationSettings
from remark.domain.repository import CommentRepository, UserRepository
from remark.domain.value import UserId

from .base import Service


def wilson_lower_bound(upvotes: int, downvotes: int, z: float = 1.96) -> float:
    """Lower bound of the Wilson score interval for the upvote ratio.

    Args:
        upvotes: Number of upvotes
        downvotes: Number of downvotes
        z: Standard normal quantile (1.96 for 95% confidence)

    Returns:
        Lower bound in [0, 1], 0 when there are no votes
    """
    n = upvotes + downvotes
    if n == 0:
        return 0.0

    phat = upvotes / n
    z2 = z * z
    numerator = phat + z2 / (2 * n) - z * math.sqrt(
        (phat * (1 - phat) + z2 / (4 * n)) / n
    )
    return numerator / (1 + z2 / n)


def calculate_rank_score(
    upvotes: int,
    downvotes: int,
    comment_count: int,
    z: float = 1.96,
    exponent: float = 3.0,
    participation_divisor: float = 3.0,
) -> int:
    """Combine vote quality and participation into a 0-100 score.

    Negative inputs are treated as 0.

    Args:
        upvotes: Lifetime upvotes received
        downvotes: Lifetime downvotes received
        comment_count: Number of live comments written
        z: Wilson z-value
        exponent: Power applied to quality
        participation_divisor: Divisor of log10(comment_count + 1)

    Returns:
        Rank score in [0, 100]
    """
    upvotes = max(upvotes, 0)
    downvotes = max(downvotes, 0)
    comment_count = max(comment_count, 0)

    quality = wilson_lower_bound(upvotes, downvotes, z)
    if quality <= 0 or comment_count == 0:
        return 0

    participation = math.log10(comment_count + 1) / participation_divisor
    rank = math.floor(quality**exponent * participation * 100)
    return min(max(rank, 0), 100)


class ReputationService(Service):
    """Domain service that keeps rank scores in step with their inputs."""

    def __init__(
        self,
        user_repository: UserRepository,
        comment_repository: CommentRepository,
        settings: ReputationSettings,
    ) -> None:
        """Initialize reputation service.

        Args:
            user_repository: User repository
            comment_repository: Comment repository (comment counts)
            settings: Rank score tuning parameters
        """
        self.user_repository = user_repository
        self.comment_repository = comment_repository
        self.settings = settings

    def score(self, upvotes: int, downvotes: int, comment_count: int) -> int:
        """Rank score for the given inputs under the configured parameters."""
        return calculate_rank_score(
            upvotes,
            downvotes,
            comment_count,
            z=self.settings.z,
            exponent=self.settings.exponent,
            participation_divisor=self.settings.participation_divisor,
        )

    async def recalculate(self, user_id: UserId) -> Optional[int]:
        """Recompute and persist a user's rank score.

        Args:
            user_id: User ID

        Returns:
            The new score, None if the user does not exist
        """
        with logfire.span("reputation_service.recalculate", user_id=user_id):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("Rank recalculation for unknown user", user_id=user_id)
                return None

            comment_count = await self.comment_repository.count_by_author(user_id)
            rank_score = self.score(
                user.total_upvotes, user.total_downvotes, comment_count
            )
            await self.user_repository.update_rank_score(user_id, rank_score)

            logfire.info(
                "Rank score recalculated",
                user_id=user_id,
                rank_score=rank_score,
                comment_count=comment_count,
            )
            return rank_score

    async def record_vote_delta(
        self, author_id: UserId, upvote_change: int, downvote_change: int
    ) -> Optional[int]:
        """Apply a vote transition's delta to the author and recompute rank.

        Runs after the vote itself is stored; a failure here is logged and
        leaves the vote in place.

        Returns:
            The author's new score, None if it could not be computed
        """
        try:
            if upvote_change or downvote_change:
                await self.user_repository.apply_vote_delta(
                    author_id, upvote_change, downvote_change
                )
            return await self.recalculate(author_id)
        except Exception as e:
            logfire.error(
                "Reputation update after vote failed",
                author_id=author_id,
                upvote_change=upvote_change,
                downvote_change=downvote_change,
                error=str(e),
            )
            return None

    async def record_comment_change(self, author_id: UserId) -> Optional[int]:
        """Recompute rank after the author's comment count changed.

        A failure is logged and leaves the comment write in place.
        """
        try:
            return await self.recalculate(author_id)
        except Exception as e:
            logfire.error(
                "Reputation update after comment failed",
                author_id=author_id,
                error=str(e),
            )
            return None
