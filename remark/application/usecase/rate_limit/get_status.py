"""Get rate limit status use case."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import RateLimitService
from remark.domain.value import ActionType


class RateLimitItem(BaseModel):
    """Budget usage for one action."""

    action: ActionType
    limit: int
    used: int
    remaining: int
    window_seconds: int
    reset_at: Optional[datetime]  # None while nothing counts against the budget


class GetRateLimitStatusRequest(BaseModel):
    """Get rate limit status request."""

    credential: str


class GetRateLimitStatusResponse(BaseModel):
    """Get rate limit status response."""

    user_id: int
    limits: list[RateLimitItem]


class GetRateLimitStatusUseCase(BaseUseCase):
    """Use case for reporting the caller's remaining write budgets."""

    def __init__(
        self, access_gate: AccessGate, rate_limit_service: RateLimitService
    ) -> None:
        """Initialize get rate limit status use case.

        Args:
            access_gate: Caller resolution
            rate_limit_service: Rate limit domain service
        """
        self.access_gate = access_gate
        self.rate_limit_service = rate_limit_service

    async def execute(
        self, request: GetRateLimitStatusRequest
    ) -> GetRateLimitStatusResponse:
        """Execute get rate limit status flow."""
        user = await self.access_gate.authenticate(request.credential)
        statuses = await self.rate_limit_service.get_status(user.id)
        return GetRateLimitStatusResponse(
            user_id=user.id,
            limits=[
                RateLimitItem(
                    action=status.action,
                    limit=status.limit,
                    used=status.used,
                    remaining=status.remaining,
                    window_seconds=status.window_minutes * 60,
                    reset_at=status.reset_at,
                )
                for status in statuses
            ],
        )
