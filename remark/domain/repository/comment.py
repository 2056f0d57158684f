"""Comment repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from remark.domain.model.comment import Comment
from remark.domain.value import CommentId, CommentSort, MediaRef, UserId


class CommentRepository(ABC):
    """Repository for Comment entity.

    Defines the contract for comment persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID.

        Args:
            comment_id: The comment's unique identifier

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def lock(self, comment_id: CommentId) -> Optional[Comment]:
        """Read a comment and hold a row lock until the transaction ends.

        Vote writers take this lock before reading or writing votes.

        Args:
            comment_id: The comment's unique identifier

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update).

        Args:
            comment: The comment to save

        Returns:
            The saved comment
        """
        pass

    @abstractmethod
    async def find_top_level(
        self,
        media: MediaRef,
        sort: CommentSort,
        limit: int,
        offset: int,
        include_deleted: bool = True,
    ) -> List[Comment]:
        """Find a page of top-level comments for a media item.

        Args:
            media: The media item
            sort: newest, oldest or top (total_votes, then newest)
            limit: Maximum number of comments to return
            offset: Number of comments to skip
            include_deleted: Whether to include soft-deleted comments

        Returns:
            Top-level comments in the requested order
        """
        pass

    @abstractmethod
    async def count_top_level(
        self, media: MediaRef, include_deleted: bool = True
    ) -> int:
        """Count top-level comments for a media item.

        Args:
            media: The media item
            include_deleted: Whether to count soft-deleted comments

        Returns:
            Number of top-level comments
        """
        pass

    @abstractmethod
    async def find_replies(
        self,
        parent_ids: List[CommentId],
        include_deleted: bool = True,
    ) -> List[Comment]:
        """Find direct replies to any of the given comments, oldest first.

        Args:
            parent_ids: Parent comment IDs
            include_deleted: Whether to include soft-deleted comments

        Returns:
            Replies ordered by created_at ascending
        """
        pass

    @abstractmethod
    async def count_replies(
        self, parent_ids: List[CommentId], include_deleted: bool = True
    ) -> dict[CommentId, int]:
        """Count direct replies per parent.

        Args:
            parent_ids: Parent comment IDs
            include_deleted: Whether to count soft-deleted replies

        Returns:
            Mapping of parent ID to reply count (parents without replies omitted)
        """
        pass

    @abstractmethod
    async def count_by_author(self, author_id: UserId) -> int:
        """Count an author's comments that are not deleted.

        Args:
            author_id: The author's user ID

        Returns:
            Number of live comments
        """
        pass

    @abstractmethod
    async def refresh_vote_totals(self, comment_id: CommentId) -> Optional[Comment]:
        """Recompute upvotes, downvotes and total_votes from the vote rows.

        Must be a single atomic read-and-write so that concurrent voters
        cannot lose updates.

        Args:
            comment_id: The comment ID

        Returns:
            The comment with fresh totals, None if it does not exist
        """
        pass

    @abstractmethod
    async def count_live(self) -> int:
        """Count comments that are not deleted."""
        pass

    @abstractmethod
    async def find_most_voted(self, limit: int = 10) -> List[Comment]:
        """List live comments with votes, most votes first.

        Args:
            limit: Maximum number of comments to return

        Returns:
            Comments ordered by total_votes then created_at, both descending
        """
        pass

    @abstractmethod
    async def depth_distribution(self) -> dict[int, int]:
        """Count live comments per depth level.

        Returns:
            Mapping of depth level to comment count
        """
        pass
