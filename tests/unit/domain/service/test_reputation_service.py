"""Unit tests for ReputationService and the rank score formula."""

import pytest

from remark.domain.repository import UserRepository
from remark.domain.service import CommentService, ReputationService
from remark.domain.service.reputation_service import (
    calculate_rank_score,
    wilson_lower_bound,
)
from tests.conftest import add_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()


class TestWilsonLowerBound:
    """Tests for wilson_lower_bound."""

    def test_no_votes_is_zero(self):
        """Without votes there is no evidence of quality."""
        assert wilson_lower_bound(0, 0) == 0.0

    def test_more_evidence_raises_the_bound(self):
        """The same ratio with more votes is more trustworthy."""
        assert wilson_lower_bound(100, 0) > wilson_lower_bound(10, 0)
        assert wilson_lower_bound(10, 0) > wilson_lower_bound(1, 0)

    def test_bound_stays_in_unit_interval(self):
        """The bound never leaves [0, 1]."""
        for up, down in [(1, 0), (0, 1), (5, 5), (1000, 1)]:
            assert 0.0 <= wilson_lower_bound(up, down) <= 1.0


class TestCalculateRankScore:
    """Tests for calculate_rank_score."""

    @pytest.mark.parametrize(
        "upvotes,downvotes,comments",
        [(0, 0, 10), (10, 0, 0), (0, 10, 10), (-5, 0, 10)],
    )
    def test_zero_cases(self, upvotes, downvotes, comments):
        """No votes, no comments, or no upvotes score zero."""
        assert calculate_rank_score(upvotes, downvotes, comments) == 0

    def test_participation_raises_the_score(self):
        """More comments with the same votes score higher."""
        few = calculate_rank_score(100, 0, 9)
        many = calculate_rank_score(100, 0, 999)

        assert 0 < few < many

    def test_score_is_clamped(self):
        """Very active users top out at 100."""
        assert calculate_rank_score(10_000, 0, 10**6) == 100

    def test_downvotes_lower_the_score(self):
        """Quality drops as the downvote share grows."""
        assert calculate_rank_score(50, 50, 999) < calculate_rank_score(90, 10, 999)


class TestRecalculate:
    """Tests for the stored rank score."""

    @pytest.mark.asyncio
    async def test_recalculate_uses_totals_and_live_comments(self, unit_env, media):
        """Stored score matches the formula over stored inputs."""
        # Arrange
        reputation_service = await unit_env.get(ReputationService)
        comment_service = await unit_env.get(CommentService)
        user_repo = await unit_env.get(UserRepository)
        author = await add_user(user_repo, 1)
        for n in range(9):
            await comment_service.create_comment(author, media, f"comment {n}")
        await user_repo.apply_vote_delta(author.id, 40, 2)

        # Act
        score = await reputation_service.recalculate(author.id)

        # Assert
        assert score == calculate_rank_score(40, 2, 9)
        stored = await user_repo.find_by_id(author.id)
        assert stored.rank_score == score

    @pytest.mark.asyncio
    async def test_unknown_user_is_skipped(self, unit_env):
        """Recalculating for a missing user returns None."""
        reputation_service = await unit_env.get(ReputationService)

        assert await reputation_service.recalculate(999) is None
