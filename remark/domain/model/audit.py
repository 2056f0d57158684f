"""Audit log entry."""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from remark.domain.model.common import DomainModel
from remark.domain.value import AuditEntryId, UserId
from remark.util.time import utcnow


class AuditEntry(DomainModel):
    """Record of who did what to which target."""

    id: AuditEntryId
    actor_id: Optional[UserId] = None
    action: str
    target_type: str
    target_id: str
    details: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)
