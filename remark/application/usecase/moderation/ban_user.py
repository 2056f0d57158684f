"""Ban user use cases."""

from typing import Optional

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import ModerationService
from remark.domain.value import ActionType, UserId

from .common import ModerationState, to_moderation_state


class BanUserRequest(BaseModel):
    """Ban user request."""

    credential: str
    user_id: int
    reason: str
    duration_hours: Optional[int] = None  # None = permanent


class LiftBanRequest(BaseModel):
    """Lift ban request."""

    credential: str
    user_id: int
    reason: Optional[str] = None


class BanUserUseCase(BaseUseCase):
    """Use case for banning a user from all writes."""

    def __init__(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> None:
        """Initialize ban user use case.

        Args:
            access_gate: Caller resolution and write admission
            moderation_service: Moderation domain service
        """
        self.access_gate = access_gate
        self.moderation_service = moderation_service

    async def execute(self, request: BanUserRequest) -> ModerationState:
        """Execute ban user flow.

        Raises:
            PermissionDeniedError: If the caller may not ban the target
            NotFoundError: If the target does not exist
        """
        actor = await self.access_gate.admit(request.credential, ActionType.BAN)
        user = await self.moderation_service.ban_user(
            actor=actor,
            target_id=UserId(request.user_id),
            reason=request.reason,
            duration_hours=request.duration_hours,
        )
        return to_moderation_state(user)


class LiftBanUseCase(BaseUseCase):
    """Use case for lifting a ban before it expires."""

    def __init__(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> None:
        """Initialize lift ban use case.

        Args:
            access_gate: Caller resolution and write admission
            moderation_service: Moderation domain service
        """
        self.access_gate = access_gate
        self.moderation_service = moderation_service

    async def execute(self, request: LiftBanRequest) -> ModerationState:
        """Execute lift ban flow.

        Raises:
            ValidationError: If the target is not banned
        """
        actor = await self.access_gate.admit(request.credential, ActionType.BAN)
        user = await self.moderation_service.lift_ban(
            actor=actor, target_id=UserId(request.user_id), reason=request.reason
        )
        return to_moderation_state(user)
