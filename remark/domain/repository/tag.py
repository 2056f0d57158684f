"""Comment tag repository interface."""

from abc import ABC, abstractmethod
from typing import List

from remark.domain.model.comment import CommentTag
from remark.domain.value import CommentId, TagType


class CommentTagRepository(ABC):
    """Repository for moderation tags on comments."""

    @abstractmethod
    async def upsert(self, tag: CommentTag) -> CommentTag:
        """Create the tag or replace the existing (comment, tag type) tag.

        Args:
            tag: The tag to store

        Returns:
            The stored tag
        """
        pass

    @abstractmethod
    async def delete(self, comment_id: CommentId, tag_type: TagType) -> bool:
        """Remove a tag.

        Args:
            comment_id: The comment ID
            tag_type: The tag type

        Returns:
            True if a tag was removed
        """
        pass

    @abstractmethod
    async def find_by_comment(self, comment_id: CommentId) -> List[CommentTag]:
        """List all tags on a comment, including expired ones.

        Args:
            comment_id: The comment ID

        Returns:
            Tags on the comment
        """
        pass
