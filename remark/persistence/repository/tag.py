"""PostgreSQL implementation of CommentTag repository."""

from typing import List

from sqlalchemy import and_, delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from remark.domain.model import CommentTag
from remark.domain.repository import CommentTagRepository
from remark.domain.value import CommentId, TagType
from remark.persistence.mappers import comment_tag_to_dict, row_to_comment_tag
from remark.persistence.tables import comment_tags_table


class PostgresCommentTagRepository(CommentTagRepository):
    """PostgreSQL implementation of CommentTagRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def upsert(self, tag: CommentTag) -> CommentTag:
        """Create the tag or replace the existing (comment, tag type) tag."""
        tag_dict = comment_tag_to_dict(tag)
        stmt = insert(comment_tags_table).values(**tag_dict)
        stmt = stmt.on_conflict_do_update(
            constraint="unique_comment_tag",
            set_={
                "tagged_by": stmt.excluded.tagged_by,
                "expires_at": stmt.excluded.expires_at,
                "created_at": stmt.excluded.created_at,
            },
        ).returning(comment_tags_table)

        result = await self.session.execute(stmt)
        row = result.fetchone()
        await self.session.flush()
        return row_to_comment_tag(row._asdict()) if row else tag

    async def delete(self, comment_id: CommentId, tag_type: TagType) -> bool:
        """Remove a tag."""
        stmt = delete(comment_tags_table).where(
            and_(
                comment_tags_table.c.comment_id == comment_id,
                comment_tags_table.c.tag_type == tag_type.value,
            )
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0  # type: ignore[attr-defined]

    async def find_by_comment(self, comment_id: CommentId) -> List[CommentTag]:
        """List all tags on a comment, including expired ones."""
        stmt = (
            select(comment_tags_table)
            .where(comment_tags_table.c.comment_id == comment_id)
            .order_by(comment_tags_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        return [row_to_comment_tag(row._asdict()) for row in result.fetchall()]
