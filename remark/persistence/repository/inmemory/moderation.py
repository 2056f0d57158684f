"""In-memory moderation record repository for testing."""

from remark.domain.model.moderation import ModerationRecord
from remark.domain.repository.moderation import ModerationRecordRepository
from remark.domain.value import UserId


class InMemoryModerationRecordRepository(ModerationRecordRepository):
    """In-memory implementation of ModerationRecordRepository for testing."""

    def __init__(self) -> None:
        self._records: list[ModerationRecord] = []

    async def add(self, record: ModerationRecord) -> ModerationRecord:
        """Append a record."""
        self._records.append(record)
        return record

    async def find_by_target(
        self, target_id: UserId, limit: int = 50, offset: int = 0
    ) -> list[ModerationRecord]:
        """List records about a user, newest first."""
        records = [r for r in reversed(self._records) if r.target_id == target_id]
        return records[offset : offset + limit]
