"""In-memory audit log repository for testing."""

from typing import Optional

from remark.domain.model.audit import AuditEntry
from remark.domain.repository.audit import AuditLogRepository
from remark.domain.value import UserId


class InMemoryAuditLogRepository(AuditLogRepository):
    """In-memory implementation of AuditLogRepository for testing."""

    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []

    async def append(self, entry: AuditEntry) -> None:
        """Append an entry."""
        self._entries.append(entry)

    async def find(
        self,
        actor_id: Optional[UserId] = None,
        action: Optional[str] = None,
        target_type: Optional[str] = None,
        target_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[AuditEntry]:
        """List entries newest first with optional filters."""
        entries = [
            e
            for e in reversed(self._entries)
            if (actor_id is None or e.actor_id == actor_id)
            and (not action or e.action == action)
            and (not target_type or e.target_type == target_type)
            and (not target_id or e.target_id == target_id)
        ]
        return entries[offset : offset + limit]
