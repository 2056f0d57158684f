"""Unit tests for RateLimitService."""

from datetime import timedelta

import pytest

from remark.domain.error import RateLimitedError
from remark.domain.service import RateLimitService
from remark.domain.value import ActionType, UserId
from remark.util.time import utcnow
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()


class TestConsume:
    """Tests for consume method."""

    @pytest.mark.asyncio
    async def test_sixth_comment_in_an_hour_is_limited(self, unit_env):
        """Five comments pass, the sixth is rejected with a retry hint."""
        # Arrange
        rate_limit_service = await unit_env.get(RateLimitService)
        user_id = UserId(1)
        now = utcnow()
        for minute in range(5):
            await rate_limit_service.consume(
                user_id, ActionType.COMMENT, now=now + timedelta(minutes=minute)
            )

        # Act & Assert
        with pytest.raises(RateLimitedError) as exc_info:
            await rate_limit_service.consume(
                user_id, ActionType.COMMENT, now=now + timedelta(minutes=10)
            )
        error = exc_info.value
        assert error.action == "comment"
        assert error.limit == 5
        assert error.window_minutes == 60
        assert 1 <= error.retry_after <= 60 * 60

    @pytest.mark.asyncio
    async def test_window_slides(self, unit_env):
        """Actions older than the window stop counting."""
        # Arrange
        rate_limit_service = await unit_env.get(RateLimitService)
        user_id = UserId(1)
        now = utcnow()
        for _ in range(5):
            await rate_limit_service.consume(user_id, ActionType.COMMENT, now=now)

        # Act
        status = await rate_limit_service.consume(
            user_id, ActionType.COMMENT, now=now + timedelta(minutes=61)
        )

        # Assert
        assert status.used == 1
        assert status.remaining == 4

    @pytest.mark.asyncio
    async def test_budgets_are_per_action(self, unit_env):
        """Spending the comment budget leaves votes untouched."""
        rate_limit_service = await unit_env.get(RateLimitService)
        user_id = UserId(1)
        now = utcnow()
        for _ in range(5):
            await rate_limit_service.consume(user_id, ActionType.COMMENT, now=now)

        status = await rate_limit_service.consume(user_id, ActionType.VOTE, now=now)

        assert status.used == 1
        assert status.limit == 20

    @pytest.mark.asyncio
    async def test_budgets_are_per_user(self, unit_env):
        """One user's usage never counts against another."""
        rate_limit_service = await unit_env.get(RateLimitService)
        now = utcnow()
        for _ in range(5):
            await rate_limit_service.consume(UserId(1), ActionType.COMMENT, now=now)

        status = await rate_limit_service.consume(
            UserId(2), ActionType.COMMENT, now=now
        )

        assert status.used == 1

    @pytest.mark.asyncio
    async def test_ban_budget_spans_a_day(self, unit_env):
        """Bans are budgeted per 24 hours."""
        rate_limit_service = await unit_env.get(RateLimitService)
        user_id = UserId(1)
        now = utcnow()
        for hour in range(5):
            await rate_limit_service.consume(
                user_id, ActionType.BAN, now=now + timedelta(hours=hour)
            )

        with pytest.raises(RateLimitedError) as exc_info:
            await rate_limit_service.consume(
                user_id, ActionType.BAN, now=now + timedelta(hours=6)
            )
        assert exc_info.value.window_minutes == 24 * 60


class TestGetStatus:
    """Tests for get_status method."""

    @pytest.mark.asyncio
    async def test_status_covers_every_action(self, unit_env):
        """Each action type is reported with its usage."""
        # Arrange
        rate_limit_service = await unit_env.get(RateLimitService)
        user_id = UserId(1)
        now = utcnow()
        await rate_limit_service.consume(user_id, ActionType.VOTE, now=now)
        await rate_limit_service.consume(user_id, ActionType.VOTE, now=now)

        # Act
        statuses = await rate_limit_service.get_status(user_id, now=now)

        # Assert
        by_action = {s.action: s for s in statuses}
        assert set(by_action) == set(ActionType)
        assert by_action[ActionType.VOTE].used == 2
        assert by_action[ActionType.VOTE].remaining == 18
        assert by_action[ActionType.VOTE].reset_at is not None
        assert by_action[ActionType.COMMENT].used == 0
        assert by_action[ActionType.COMMENT].reset_at is None
