"""Audit domain service."""

from typing import Any, Optional
from uuid import uuid4

import logfire

from remark.domain.model.audit import AuditEntry
from remark.domain.repository import AuditLogRepository
from remark.domain.value import AuditEntryId, UserId

from .base import Service

# Prefix for actions taken through the moderation state machine
MODERATION_PREFIX = "MODERATION_"


class AuditService(Service):
    """Fire-and-forget audit sink.

    Writing an entry never fails the operation being audited.
    """

    def __init__(self, audit_log_repository: AuditLogRepository) -> None:
        """Initialize audit service.

        Args:
            audit_log_repository: Audit log repository
        """
        self.audit_log_repository = audit_log_repository

    async def record(
        self,
        actor_id: Optional[UserId],
        action: str,
        target_type: str,
        target_id: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """Append an audit entry, logging instead of raising on failure.

        Args:
            actor_id: User who performed the action
            action: Action name, e.g. DELETE_COMMENT
            target_type: Kind of target, e.g. comment or user
            target_id: Target identifier
            details: JSON-serializable context
        """
        entry = AuditEntry(
            id=AuditEntryId(uuid4()),
            actor_id=actor_id,
            action=action,
            target_type=target_type,
            target_id=target_id,
            details=details or {},
        )
        try:
            await self.audit_log_repository.append(entry)
        except Exception as e:
            logfire.error(
                "Audit log write failed",
                action=action,
                target_type=target_type,
                target_id=target_id,
                error=str(e),
            )

    async def record_moderation(
        self,
        actor_id: UserId,
        action: str,
        target_id: UserId,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """Append an audit entry for a moderation action on a user."""
        await self.record(
            actor_id=actor_id,
            action=f"{MODERATION_PREFIX}{action}",
            target_type="user",
            target_id=str(target_id),
            details=details,
        )

    async def list_entries(
        self,
        actor_id: Optional[UserId] = None,
        action: Optional[str] = None,
        target_type: Optional[str] = None,
        target_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[AuditEntry]:
        """List audit entries newest first with optional filters."""
        with logfire.span(
            "audit_service.list_entries",
            actor_id=actor_id,
            action=action,
            target_type=target_type,
        ):
            return await self.audit_log_repository.find(
                actor_id=actor_id,
                action=action,
                target_type=target_type,
                target_id=target_id,
                limit=limit,
                offset=offset,
            )
