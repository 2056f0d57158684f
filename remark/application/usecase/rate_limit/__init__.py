"""Rate limit use cases."""

from .get_status import (
    GetRateLimitStatusRequest,
    GetRateLimitStatusResponse,
    GetRateLimitStatusUseCase,
    RateLimitItem,
)

__all__ = [
    "GetRateLimitStatusRequest",
    "GetRateLimitStatusResponse",
    "GetRateLimitStatusUseCase",
    "RateLimitItem",
]
