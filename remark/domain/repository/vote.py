"""Vote repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from remark.domain.model.vote import DailyVotes, Vote, VoterActivity
from remark.domain.value import CommentId, UserId, VoteType


class VoteRepository(ABC):
    """Repository for Vote entity."""

    @abstractmethod
    async def find(self, comment_id: CommentId, user_id: UserId) -> Optional[Vote]:
        """Find a user's vote on a comment.

        Args:
            comment_id: The comment ID
            user_id: The voter's ID

        Returns:
            The vote if one exists, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, vote: Vote) -> Vote:
        """Insert a new vote or update the direction of an existing one.

        Args:
            vote: The vote to save

        Returns:
            The saved vote

        Raises:
            IntegrityError: If a concurrent insert created the same vote
        """
        pass

    @abstractmethod
    async def delete(self, comment_id: CommentId, user_id: UserId) -> bool:
        """Delete a user's vote on a comment.

        Args:
            comment_id: The comment ID
            user_id: The voter's ID

        Returns:
            True if a vote was deleted
        """
        pass

    @abstractmethod
    async def count_by_comment(self, comment_id: CommentId) -> tuple[int, int]:
        """Count the live vote rows for a comment.

        Args:
            comment_id: The comment ID

        Returns:
            Tuple of (upvotes, downvotes)
        """
        pass

    @abstractmethod
    async def find_by_comment(
        self,
        comment_id: CommentId,
        vote_type: Optional[VoteType] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Vote]:
        """List votes on a comment, newest first.

        Args:
            comment_id: The comment ID
            vote_type: Only votes of this direction (None = both)
            limit: Maximum number of votes to return
            offset: Number of votes to skip

        Returns:
            Votes on the comment
        """
        pass

    @abstractmethod
    async def find_by_user_and_comments(
        self, user_id: UserId, comment_ids: List[CommentId]
    ) -> dict[CommentId, VoteType]:
        """Find a user's votes on a batch of comments.

        Args:
            user_id: The voter's ID
            comment_ids: Comments to look up

        Returns:
            Mapping of comment ID to vote direction for comments voted on
        """
        pass

    @abstractmethod
    async def count_by_type(self) -> tuple[int, int]:
        """Count every live vote row.

        Returns:
            Tuple of (upvotes, downvotes)
        """
        pass

    @abstractmethod
    async def find_top_voters(self, limit: int = 10) -> List[VoterActivity]:
        """List the users holding the most votes.

        Args:
            limit: Maximum number of voters to return

        Returns:
            Voters ordered by vote count descending
        """
        pass

    @abstractmethod
    async def daily_totals(self, since: datetime) -> List[DailyVotes]:
        """Group votes created at or after ``since`` by UTC day.

        Args:
            since: Start of the period

        Returns:
            One entry per day with votes, oldest first
        """
        pass
