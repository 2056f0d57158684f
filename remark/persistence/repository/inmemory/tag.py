"""In-memory comment tag repository for testing."""

from remark.domain.model.comment import CommentTag
from remark.domain.repository.tag import CommentTagRepository
from remark.domain.value import CommentId, TagType


class InMemoryCommentTagRepository(CommentTagRepository):
    """In-memory implementation of CommentTagRepository for testing."""

    def __init__(self) -> None:
        self._tags: dict[tuple[CommentId, TagType], CommentTag] = {}

    async def upsert(self, tag: CommentTag) -> CommentTag:
        """Create or replace the (comment, tag type) tag."""
        self._tags[(tag.comment_id, tag.tag_type)] = tag
        return tag

    async def delete(self, comment_id: CommentId, tag_type: TagType) -> bool:
        """Remove a tag."""
        return self._tags.pop((comment_id, tag_type), None) is not None

    async def find_by_comment(self, comment_id: CommentId) -> list[CommentTag]:
        """List all tags on a comment, including expired ones."""
        tags = [t for t in self._tags.values() if t.comment_id == comment_id]
        tags.sort(key=lambda t: t.created_at)
        return tags
