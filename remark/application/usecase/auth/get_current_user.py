"""Get current user use case."""

from pydantic import BaseModel

from remark.application.usecase.base import BaseUseCase
from remark.domain.service import ROLE_PERMISSIONS, AuthService
from remark.domain.value import Permission

from .authenticate import UserInfo


class GetCurrentUserRequest(BaseModel):
    """Get current user request."""

    credential: str


class GetCurrentUserResponse(UserInfo):
    """Get current user response."""

    permissions: list[Permission]


class GetCurrentUserUseCase(BaseUseCase):
    """Use case for getting the current authenticated user."""

    def __init__(self, auth_service: AuthService) -> None:
        """Initialize get current user use case.

        Args:
            auth_service: Authentication domain service
        """
        self.auth_service = auth_service

    async def execute(self, request: GetCurrentUserRequest) -> GetCurrentUserResponse:
        """Execute get current user flow.

        Permissions follow the effective role, so a shadow-banned
        moderator sees only user permissions.

        Raises:
            InvalidCredentialError: If the provider rejects the credential
        """
        user = await self.auth_service.authenticate(request.credential)
        permissions = sorted(
            ROLE_PERMISSIONS[user.effective_role], key=lambda p: p.value
        )
        return GetCurrentUserResponse(
            **UserInfo.from_user(user).model_dump(),
            permissions=permissions,
        )
