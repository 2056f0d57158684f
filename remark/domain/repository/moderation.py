"""Moderation record repository interface."""

from abc import ABC, abstractmethod
from typing import List

from remark.domain.model.moderation import ModerationRecord
from remark.domain.value import UserId


class ModerationRecordRepository(ABC):
    """Append-only repository for moderation records."""

    @abstractmethod
    async def add(self, record: ModerationRecord) -> ModerationRecord:
        """Append a record.

        Args:
            record: The record to append

        Returns:
            The stored record
        """
        pass

    @abstractmethod
    async def find_by_target(
        self, target_id: UserId, limit: int = 50, offset: int = 0
    ) -> List[ModerationRecord]:
        """List records about a user, newest first.

        Args:
            target_id: The moderated user's ID
            limit: Maximum number of records to return
            offset: Number of records to skip

        Returns:
            Moderation records for the user
        """
        pass
