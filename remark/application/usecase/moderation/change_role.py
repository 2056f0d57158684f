"""Change role use case."""

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import ModerationService
from remark.domain.value import ActionType, Role, UserId

from .common import ModerationState, to_moderation_state


class ChangeRoleRequest(BaseModel):
    """Change role request."""

    credential: str
    user_id: int
    role: Role
    reason: str


class ChangeRoleUseCase(BaseUseCase):
    """Use case for promoting or demoting a user."""

    def __init__(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> None:
        """Initialize change role use case.

        Args:
            access_gate: Caller resolution and write admission
            moderation_service: Moderation domain service
        """
        self.access_gate = access_gate
        self.moderation_service = moderation_service

    async def execute(self, request: ChangeRoleRequest) -> ModerationState:
        """Execute change role flow.

        Raises:
            PermissionDeniedError: If the change is outside the caller's scope
            ValidationError: If the user already has the role
        """
        actor = await self.access_gate.admit(request.credential, ActionType.BAN)
        user = await self.moderation_service.change_role(
            actor=actor,
            target_id=UserId(request.user_id),
            new_role=request.role,
            reason=request.reason,
        )
        return to_moderation_state(user)
