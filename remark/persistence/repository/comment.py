"""PostgreSQL implementation of Comment repository."""

from typing import List, Optional

from sqlalchemy import asc, desc, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from remark.domain.model import Comment
from remark.domain.repository import CommentRepository
from remark.domain.value import CommentId, CommentSort, MediaRef, UserId, VoteType
from remark.persistence.mappers import comment_to_dict, row_to_comment
from remark.persistence.tables import comment_votes_table, comments_table

# Thread shape and vote counters are never rewritten by save()
_IMMUTABLE_COLUMNS = (
    "id",
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


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        stmt = select(comments_table).where(comments_table.c.id == comment_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def lock(self, comment_id: CommentId) -> Optional[Comment]:
        """Read a comment with SELECT ... FOR UPDATE."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.id == comment_id)
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update).

        Vote counters are maintained by refresh_vote_totals only.
        """
        comment_dict = comment_to_dict(comment)
        stmt = insert(comments_table).values(**comment_dict)
        stmt = stmt.on_conflict_do_update(
            index_elements=[comments_table.c.id],
            set_={
                k: stmt.excluded[k]
                for k in comment_dict
                if k not in _IMMUTABLE_COLUMNS
            },
        ).returning(comments_table)

        result = await self.session.execute(stmt)
        row = result.fetchone()
        await self.session.flush()
        return row_to_comment(row._asdict()) if row else comment

    def _top_level_query(self, media: MediaRef, include_deleted: bool):
        stmt = (
            select(comments_table)
            .where(comments_table.c.media_id == media.media_id)
            .where(comments_table.c.media_type == media.media_type.value)
            .where(comments_table.c.parent_comment_id.is_(None))
        )
        if not include_deleted:
            stmt = stmt.where(comments_table.c.is_deleted.is_(False))
        return stmt

    async def find_top_level(
        self,
        media: MediaRef,
        sort: CommentSort,
        limit: int,
        offset: int,
        include_deleted: bool = True,
    ) -> List[Comment]:
        """Find a page of top-level comments for a media item."""
        stmt = self._top_level_query(media, include_deleted)

        if sort == CommentSort.OLDEST:
            stmt = stmt.order_by(asc(comments_table.c.created_at))
        elif sort == CommentSort.TOP:
            stmt = stmt.order_by(
                desc(comments_table.c.total_votes), desc(comments_table.c.created_at)
            )
        else:
            stmt = stmt.order_by(desc(comments_table.c.created_at))

        stmt = stmt.limit(limit).offset(offset)
        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def count_top_level(
        self, media: MediaRef, include_deleted: bool = True
    ) -> int:
        """Count top-level comments for a media item."""
        subquery = self._top_level_query(media, include_deleted).subquery()
        stmt = select(func.count()).select_from(subquery)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def find_replies(
        self,
        parent_ids: List[CommentId],
        include_deleted: bool = True,
    ) -> List[Comment]:
        """Find direct replies to any of the given comments, oldest first."""
        if not parent_ids:
            return []

        stmt = select(comments_table).where(
            comments_table.c.parent_comment_id.in_(parent_ids)
        )
        if not include_deleted:
            stmt = stmt.where(comments_table.c.is_deleted.is_(False))
        stmt = stmt.order_by(asc(comments_table.c.created_at))

        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def count_replies(
        self, parent_ids: List[CommentId], include_deleted: bool = True
    ) -> dict[CommentId, int]:
        """Count direct replies per parent."""
        if not parent_ids:
            return {}

        stmt = (
            select(comments_table.c.parent_comment_id, func.count())
            .where(comments_table.c.parent_comment_id.in_(parent_ids))
            .group_by(comments_table.c.parent_comment_id)
        )
        if not include_deleted:
            stmt = stmt.where(comments_table.c.is_deleted.is_(False))

        result = await self.session.execute(stmt)
        return {CommentId(parent_id): count for parent_id, count in result.all()}

    async def count_by_author(self, author_id: UserId) -> int:
        """Count an author's comments that are not deleted."""
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(comments_table.c.author_id == author_id)
            .where(comments_table.c.is_deleted.is_(False))
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def refresh_vote_totals(self, comment_id: CommentId) -> Optional[Comment]:
        """Recompute the vote counters from the vote rows in one statement."""

        def count_of(vote_type: VoteType):
            return (
                select(func.count())
                .select_from(comment_votes_table)
                .where(comment_votes_table.c.comment_id == comment_id)
                .where(comment_votes_table.c.vote_type == int(vote_type))
                .scalar_subquery()
            )

        upvotes = count_of(VoteType.UP)
        downvotes = count_of(VoteType.DOWN)
        stmt = (
            comments_table.update()
            .where(comments_table.c.id == comment_id)
            .values(
                upvotes=upvotes,
                downvotes=downvotes,
                total_votes=upvotes + downvotes,
            )
            .returning(comments_table)
        )

        result = await self.session.execute(stmt)
        row = result.fetchone()
        await self.session.flush()
        return row_to_comment(row._asdict()) if row else None

    async def count_live(self) -> int:
        """Count comments that are not deleted."""
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(comments_table.c.is_deleted.is_(False))
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def find_most_voted(self, limit: int = 10) -> List[Comment]:
        """List live comments with votes, most votes first."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.is_deleted.is_(False))
            .where(comments_table.c.total_votes > 0)
            .order_by(
                desc(comments_table.c.total_votes), desc(comments_table.c.created_at)
            )
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def depth_distribution(self) -> dict[int, int]:
        """Count live comments per depth level."""
        stmt = (
            select(comments_table.c.depth_level, func.count())
            .where(comments_table.c.is_deleted.is_(False))
            .group_by(comments_table.c.depth_level)
        )
        result = await self.session.execute(stmt)
        return {depth: count for depth, count in result.all()}
