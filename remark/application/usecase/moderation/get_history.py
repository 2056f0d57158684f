"""Get moderation history use case."""

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import ModerationService
from remark.domain.value import UserId

from .common import (
    ModerationRecordItem,
    ModerationState,
    to_moderation_state,
    to_record_item,
)


class GetModerationHistoryRequest(BaseModel):
    """Get moderation history request."""

    credential: str
    user_id: int
    page: int = 1
    limit: int = 50


class GetModerationHistoryResponse(BaseModel):
    """Get moderation history response."""

    user: ModerationState
    records: list[ModerationRecordItem]
    page: int
    limit: int


class GetModerationHistoryUseCase(BaseUseCase):
    """Use case for reading a user's moderation records, newest first."""

    def __init__(
        self, access_gate: AccessGate, moderation_service: ModerationService
    ) -> None:
        """Initialize get moderation history use case.

        Args:
            access_gate: Caller resolution
            moderation_service: Moderation domain service
        """
        self.access_gate = access_gate
        self.moderation_service = moderation_service

    async def execute(
        self, request: GetModerationHistoryRequest
    ) -> GetModerationHistoryResponse:
        """Execute get moderation history flow.

        Raises:
            PermissionDeniedError: If the caller may not view reports
            NotFoundError: If the user does not exist
        """
        actor = await self.access_gate.authenticate(request.credential)
        page = max(request.page, 1)
        limit = min(max(request.limit, 1), 100)
        records = await self.moderation_service.get_history(
            actor, UserId(request.user_id), limit=limit, offset=(page - 1) * limit
        )
        target = await self.moderation_service.get_user(UserId(request.user_id))
        return GetModerationHistoryResponse(
            user=to_moderation_state(target),
            records=[to_record_item(record) for record in records],
            page=page,
            limit=limit,
        )
