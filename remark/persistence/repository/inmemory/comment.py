"""In-memory comment repository for testing."""

from typing import Optional

from remark.domain.model.comment import Comment
from remark.domain.repository.comment import CommentRepository
from remark.domain.repository.vote import VoteRepository
from remark.domain.value import CommentId, CommentSort, MediaRef, UserId

# Thread shape and vote counters are never rewritten by save()
_PRESERVED_FIELDS = (
    "media_id",
    "media_type",
    "author_id",
    "parent_comment_id",
    "root_comment_id",
    "depth_level",
    "created_at",
    "upvotes",
    "downvotes",
    "total_votes",
)


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing.

    Vote totals are recomputed from the vote repository it is given.
    """

    def __init__(self, vote_repository: VoteRepository) -> None:
        self._comments: dict[CommentId, Comment] = {}
        self._vote_repository = vote_repository

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        return self._comments.get(comment_id)

    async def lock(self, comment_id: CommentId) -> Optional[Comment]:
        """Read a comment. Nothing to lock in memory."""
        return self._comments.get(comment_id)

    async def save(self, comment: Comment) -> Comment:
        """Save or update a comment."""
        existing = self._comments.get(comment.id)
        if existing:
            comment = comment.model_copy(
                update={f: getattr(existing, f) for f in _PRESERVED_FIELDS}
            )
        self._comments[comment.id] = comment
        return comment

    def _top_level(self, media: MediaRef, include_deleted: bool) -> list[Comment]:
        comments = [
            c
            for c in self._comments.values()
            if c.parent_comment_id is None and c.media == media
        ]
        if not include_deleted:
            comments = [c for c in comments if not c.is_deleted]
        return comments

    async def find_top_level(
        self,
        media: MediaRef,
        sort: CommentSort,
        limit: int,
        offset: int,
        include_deleted: bool = True,
    ) -> list[Comment]:
        """Find a page of top-level comments for a media item."""
        comments = self._top_level(media, include_deleted)

        if sort == CommentSort.OLDEST:
            comments.sort(key=lambda c: c.created_at)
        elif sort == CommentSort.TOP:
            comments.sort(key=lambda c: (c.total_votes, c.created_at), reverse=True)
        else:
            comments.sort(key=lambda c: c.created_at, reverse=True)

        # Paginate
        return comments[offset : offset + limit]

    async def count_top_level(
        self, media: MediaRef, include_deleted: bool = True
    ) -> int:
        """Count top-level comments for a media item."""
        return len(self._top_level(media, include_deleted))

    async def find_replies(
        self,
        parent_ids: list[CommentId],
        include_deleted: bool = True,
    ) -> list[Comment]:
        """Find direct replies to any of the given comments, oldest first."""
        parents = set(parent_ids)
        replies = [
            c for c in self._comments.values() if c.parent_comment_id in parents
        ]
        if not include_deleted:
            replies = [c for c in replies if not c.is_deleted]
        replies.sort(key=lambda c: c.created_at)
        return replies

    async def count_replies(
        self, parent_ids: list[CommentId], include_deleted: bool = True
    ) -> dict[CommentId, int]:
        """Count direct replies per parent."""
        counts: dict[CommentId, int] = {}
        for reply in await self.find_replies(parent_ids, include_deleted):
            parent_id = reply.parent_comment_id
            counts[parent_id] = counts.get(parent_id, 0) + 1
        return counts

    async def count_by_author(self, author_id: UserId) -> int:
        """Count an author's comments that are not deleted."""
        return sum(
            1
            for c in self._comments.values()
            if c.author_id == author_id and not c.is_deleted
        )

    async def refresh_vote_totals(self, comment_id: CommentId) -> Optional[Comment]:
        """Recompute the vote counters from the stored votes."""
        comment = self._comments.get(comment_id)
        if not comment:
            return None

        upvotes, downvotes = await self._vote_repository.count_by_comment(comment_id)
        comment = comment.model_copy(
            update={
                "upvotes": upvotes,
                "downvotes": downvotes,
                "total_votes": upvotes + downvotes,
            }
        )
        self._comments[comment_id] = comment
        return comment

    async def count_live(self) -> int:
        """Count comments that are not deleted."""
        return sum(1 for c in self._comments.values() if not c.is_deleted)

    async def find_most_voted(self, limit: int = 10) -> list[Comment]:
        """List live comments with votes, most votes first."""
        comments = [
            c for c in self._comments.values() if not c.is_deleted and c.total_votes > 0
        ]
        comments.sort(key=lambda c: (c.total_votes, c.created_at), reverse=True)
        return comments[:limit]

    async def depth_distribution(self) -> dict[int, int]:
        """Count live comments per depth level."""
        counts: dict[int, int] = {}
        for comment in self._comments.values():
            if not comment.is_deleted:
                counts[comment.depth_level] = counts.get(comment.depth_level, 0) + 1
        return counts
