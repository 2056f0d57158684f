"""Authenticate use case."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from remark.application.usecase.base import BaseUseCase
from remark.domain.model import User
from remark.domain.service import AuthService
from remark.domain.value import Role


class AuthenticateRequest(BaseModel):
    """Authenticate request."""

    credential: str  # Bearer credential issued by the identity provider


class UserInfo(BaseModel):
    """User as seen by themselves. Shadow ban state is not included."""

    user_id: int
    username: str
    avatar_url: Optional[str]
    role: Role
    is_mod: bool
    is_admin: bool
    is_banned: bool
    ban_expires: Optional[datetime]
    is_muted: bool
    mute_expires: Optional[datetime]
    warning_count: int
    total_warns: int
    total_upvotes: int
    total_downvotes: int
    rank_score: int
    created_at: datetime
    last_active: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserInfo":
        """Build the self view of a user."""
        return cls(
            user_id=user.id,
            username=str(user.username),
            avatar_url=user.avatar_url,
            role=user.role,
            is_mod=user.is_mod,
            is_admin=user.is_admin,
            is_banned=user.is_banned,
            ban_expires=user.ban_expires,
            is_muted=user.is_muted,
            mute_expires=user.mute_expires,
            warning_count=user.warning_count,
            total_warns=user.total_warns,
            total_upvotes=user.total_upvotes,
            total_downvotes=user.total_downvotes,
            rank_score=user.rank_score,
            created_at=user.created_at,
            last_active=user.last_active,
        )


class AuthenticateResponse(UserInfo):
    """Authenticate response."""

    pass


class AuthenticateUseCase(BaseUseCase):
    """Use case for signing in with an identity provider credential."""

    def __init__(self, auth_service: AuthService) -> None:
        """Initialize authenticate use case.

        Args:
            auth_service: Authentication domain service
        """
        self.auth_service = auth_service

    async def execute(self, request: AuthenticateRequest) -> AuthenticateResponse:
        """Execute authenticate flow.

        Steps:
        1. Verify the credential with the identity provider
        2. Create or refresh the user, resolving their role

        Args:
            request: Authenticate request

        Returns:
            The signed-in user

        Raises:
            InvalidCredentialError: If the provider rejects the credential
        """
        user = await self.auth_service.authenticate(request.credential)
        info = UserInfo.from_user(user)
        return AuthenticateResponse(**info.model_dump())
