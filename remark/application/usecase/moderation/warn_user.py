"""Warn user use case."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import ModerationService
from remark.domain.value import ActionType, UserId

from .common import ModerationState, to_moderation_state


class WarnUserRequest(BaseModel):
    """Warn user request."""

    credential: str
    user_id: int
    reason: str
    description: Optional[str] = None


class WarnUserResponse(BaseModel):
    """Warn user response."""

    user: ModerationState
    muted_until: Optional[datetime]


class WarnUserUseCase(BaseUseCase):
    """Use case for warning a user, muting them at the escalation thresholds."""

    def __init__(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> None:
        """Initialize warn user use case.

        Args:
            access_gate: Caller resolution and write admission
            moderation_service: Moderation domain service
        """
        self.access_gate = access_gate
        self.moderation_service = moderation_service

    async def execute(self, request: WarnUserRequest) -> WarnUserResponse:
        """Execute warn user flow.

        Raises:
            PermissionDeniedError: If the caller may not warn the target
            NotFoundError: If the target does not exist
            ValidationError: If the reason is missing or too long
        """
        actor = await self.access_gate.admit(request.credential, ActionType.WARN)
        outcome = await self.moderation_service.warn_user(
            actor=actor,
            target_id=UserId(request.user_id),
            reason=request.reason,
            description=request.description,
        )
        return WarnUserResponse(
            user=to_moderation_state(outcome.user),
            muted_until=outcome.muted_until,
        )
