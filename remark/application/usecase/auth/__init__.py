"""Auth use cases."""

from .authenticate import (
    AuthenticateRequest,
    AuthenticateResponse,
    AuthenticateUseCase,
    UserInfo,
)
from .get_current_user import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
    GetCurrentUserUseCase,
)

__all__ = [
    "AuthenticateRequest",
    "AuthenticateResponse",
    "AuthenticateUseCase",
    "GetCurrentUserRequest",
    "GetCurrentUserResponse",
    "GetCurrentUserUseCase",
    "UserInfo",
]
