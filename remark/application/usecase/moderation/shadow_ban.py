"""Shadow ban use cases."""

from typing import Optional

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import ModerationService
from remark.domain.value import ActionType, UserId

from .common import ModerationState, to_moderation_state


class ShadowBanRequest(BaseModel):
    """Shadow ban request."""

    credential: str
    user_id: int
    reason: str
    duration_hours: Optional[int] = None  # None = permanent


class LiftShadowBanRequest(BaseModel):
    """Lift shadow ban request."""

    credential: str
    user_id: int
    reason: Optional[str] = None


class ShadowBanUseCase(BaseUseCase):
    """Use case for shadow-banning a user.

    A shadow-banned user keeps posting but loses any elevated privileges.
    """

    def __init__(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> None:
        """Initialize shadow ban use case.

        Args:
            access_gate: Caller resolution and write admission
            moderation_service: Moderation domain service
        """
        self.access_gate = access_gate
        self.moderation_service = moderation_service

    async def execute(self, request: ShadowBanRequest) -> ModerationState:
        """Execute shadow ban flow."""
        actor = await self.access_gate.admit(request.credential, ActionType.BAN)
        user = await self.moderation_service.shadow_ban_user(
            actor=actor,
            target_id=UserId(request.user_id),
            reason=request.reason,
            duration_hours=request.duration_hours,
        )
        return to_moderation_state(user)


class LiftShadowBanUseCase(BaseUseCase):
    """Use case for removing a shadow ban."""

    def __init__(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> None:
        """Initialize lift shadow ban use case.

        Args:
            access_gate: Caller resolution and write admission
            moderation_service: Moderation domain service
        """
        self.access_gate = access_gate
        self.moderation_service = moderation_service

    async def execute(self, request: LiftShadowBanRequest) -> ModerationState:
        """Execute lift shadow ban flow."""
        actor = await self.access_gate.admit(request.credential, ActionType.BAN)
        user = await self.moderation_service.lift_shadow_ban(
            actor=actor, target_id=UserId(request.user_id), reason=request.reason
        )
        return to_moderation_state(user)
