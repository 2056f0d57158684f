"""Clear warnings use case."""

from typing import Optional

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import ModerationService
from remark.domain.value import ActionType, UserId

from .common import ModerationState, to_moderation_state


class ClearWarningsRequest(BaseModel):
    """Clear warnings request."""

    credential: str
    user_id: int
    reason: Optional[str] = None


class ClearWarningsUseCase(BaseUseCase):
    """Use case for resetting a user's active warning count."""

    def __init__(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> None:
        """Initialize clear warnings use case.

        Args:
            access_gate: Caller resolution and write admission
            moderation_service: Moderation domain service
        """
        self.access_gate = access_gate
        self.moderation_service = moderation_service

    async def execute(self, request: ClearWarningsRequest) -> ModerationState:
        """Execute clear warnings flow. The lifetime total is kept."""
        actor = await self.access_gate.admit(request.credential, ActionType.BAN)
        user = await self.moderation_service.clear_warnings(
            actor=actor, target_id=UserId(request.user_id), reason=request.reason
        )
        return to_moderation_state(user)
