"""Audit log repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from remark.domain.model.audit import AuditEntry
from remark.domain.value import UserId


class AuditLogRepository(ABC):
    """Append-only store of audit entries."""

    @abstractmethod
    async def append(self, entry: AuditEntry) -> None:
        """Append an entry.

        Args:
            entry: The entry to append
        """
        pass

    @abstractmethod
    async def find(
        self,
        actor_id: Optional[UserId] = None,
        action: Optional[str] = None,
        target_type: Optional[str] = None,
        target_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[AuditEntry]:
        """List entries newest first.

        Args:
            actor_id: Only entries by this actor
            action: Only actions containing this text (case-insensitive)
            target_type: Only entries on this target type
            target_id: Only entries on this target
            limit: Maximum number of entries to return
            offset: Number of entries to skip

        Returns:
            Matching audit entries
        """
        pass
