"""List audit log use case."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import AuditService, ModerationService
from remark.domain.value import Permission, UserId


class AuditEntryItem(BaseModel):
    """One audit log entry."""

    entry_id: str
    actor_id: Optional[int]
    action: str
    target_type: str
    target_id: str
    details: dict[str, Any]
    created_at: datetime


class ListAuditLogRequest(BaseModel):
    """List audit log request."""

    credential: str
    actor_id: Optional[int] = None
    action: Optional[str] = None
    target_type: Optional[str] = None
    target_id: Optional[str] = None
    page: int = 1
    limit: int = 50


class ListAuditLogResponse(BaseModel):
    """List audit log response."""

    entries: list[AuditEntryItem]
    page: int
    limit: int


class ListAuditLogUseCase(BaseUseCase):
    """Use case for reading the audit log, newest first."""

    def __init__(
        self,
        access_gate: AccessGate,
        audit_service: AuditService,
        moderation_service: ModerationService,
    ) -> None:
        """Initialize list audit log use case.

        Args:
            access_gate: Caller resolution
            audit_service: Audit domain service
            moderation_service: Permission checks
        """
        self.access_gate = access_gate
        self.audit_service = audit_service
        self.moderation_service = moderation_service

    async def execute(self, request: ListAuditLogRequest) -> ListAuditLogResponse:
        """Execute list audit log flow.

        Raises:
            PermissionDeniedError: If the caller may not view the audit log
        """
        actor = await self.access_gate.authenticate(request.credential)
        self.moderation_service.require_permission(actor, Permission.VIEW_AUDIT_LOG)

        page = max(request.page, 1)
        limit = min(max(request.limit, 1), 100)
        entries = await self.audit_service.list_entries(
            actor_id=UserId(request.actor_id) if request.actor_id else None,
            action=request.action,
            target_type=request.target_type,
            target_id=request.target_id,
            limit=limit,
            offset=(page - 1) * limit,
        )
        return ListAuditLogResponse(
            entries=[
                AuditEntryItem(
                    entry_id=str(entry.id),
                    actor_id=entry.actor_id,
                    action=entry.action,
                    target_type=entry.target_type,
                    target_id=entry.target_id,
                    details=entry.details,
                    created_at=entry.created_at,
                )
                for entry in entries
            ],
            page=page,
            limit=limit,
        )
