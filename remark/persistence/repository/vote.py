"""PostgreSQL implementation of Vote repository."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, delete, desc, distinct, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from remark.domain.model import DailyVotes, Vote, VoterActivity
from remark.domain.repository import VoteRepository
from remark.domain.value import CommentId, UserId, VoteType
from remark.persistence.mappers import row_to_vote, vote_to_dict
from remark.persistence.tables import comment_votes_table


class PostgresVoteRepository(VoteRepository):
    """PostgreSQL implementation of VoteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find(self, comment_id: CommentId, user_id: UserId) -> Optional[Vote]:
        """Find a user's vote on a comment."""
        stmt = select(comment_votes_table).where(
            and_(
                comment_votes_table.c.comment_id == comment_id,
                comment_votes_table.c.user_id == user_id,
            )
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_vote(row._asdict()) if row else None

    async def save(self, vote: Vote) -> Vote:
        """Insert a vote, or change the direction of the existing row.

        The insert runs in a savepoint so that a unique violation from a
        concurrent voter leaves the surrounding transaction usable.
        """
        existing = await self.find(vote.comment_id, vote.user_id)

        if existing:
            stmt = (
                comment_votes_table.update()
                .where(comment_votes_table.c.id == existing.id)
                .values(vote_type=int(vote.vote_type), updated_at=vote.updated_at)
            )
            await self.session.execute(stmt)
        else:
            stmt = insert(comment_votes_table).values(**vote_to_dict(vote))
            async with self.session.begin_nested():
                await self.session.execute(stmt)

        await self.session.flush()
        return vote

    async def delete(self, comment_id: CommentId, user_id: UserId) -> bool:
        """Delete a user's vote on a comment."""
        stmt = delete(comment_votes_table).where(
            and_(
                comment_votes_table.c.comment_id == comment_id,
                comment_votes_table.c.user_id == user_id,
            )
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0  # type: ignore[attr-defined]

    async def count_by_comment(self, comment_id: CommentId) -> tuple[int, int]:
        """Count the live vote rows for a comment."""
        stmt = (
            select(comment_votes_table.c.vote_type, func.count())
            .where(comment_votes_table.c.comment_id == comment_id)
            .group_by(comment_votes_table.c.vote_type)
        )
        result = await self.session.execute(stmt)
        counts = {vote_type: count for vote_type, count in result.all()}
        return counts.get(int(VoteType.UP), 0), counts.get(int(VoteType.DOWN), 0)

    async def find_by_comment(
        self,
        comment_id: CommentId,
        vote_type: Optional[VoteType] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Vote]:
        """List votes on a comment, newest first."""
        stmt = select(comment_votes_table).where(
            comment_votes_table.c.comment_id == comment_id
        )
        if vote_type is not None:
            stmt = stmt.where(comment_votes_table.c.vote_type == int(vote_type))
        stmt = (
            stmt.order_by(desc(comment_votes_table.c.updated_at))
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_vote(row._asdict()) for row in result.fetchall()]

    async def find_by_user_and_comments(
        self, user_id: UserId, comment_ids: List[CommentId]
    ) -> dict[CommentId, VoteType]:
        """Find a user's votes on multiple comments (batch query)."""
        if not comment_ids:
            return {}

        stmt = select(
            comment_votes_table.c.comment_id, comment_votes_table.c.vote_type
        ).where(
            and_(
                comment_votes_table.c.user_id == user_id,
                comment_votes_table.c.comment_id.in_(comment_ids),
            )
        )
        result = await self.session.execute(stmt)
        return {
            CommentId(comment_id): VoteType(vote_type)
            for comment_id, vote_type in result.all()
        }

    async def count_by_type(self) -> tuple[int, int]:
        """Count every live vote row."""
        stmt = select(comment_votes_table.c.vote_type, func.count()).group_by(
            comment_votes_table.c.vote_type
        )
        result = await self.session.execute(stmt)
        counts = {vote_type: count for vote_type, count in result.all()}
        return counts.get(int(VoteType.UP), 0), counts.get(int(VoteType.DOWN), 0)

    async def find_top_voters(self, limit: int = 10) -> List[VoterActivity]:
        """List the users holding the most votes."""
        c = comment_votes_table.c
        stmt = (
            select(
                c.user_id,
                func.count().filter(c.vote_type == int(VoteType.UP)),
                func.count().filter(c.vote_type == int(VoteType.DOWN)),
            )
            .group_by(c.user_id)
            .order_by(desc(func.count()), c.user_id)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [
            VoterActivity(user_id=UserId(user_id), upvotes=up, downvotes=down)
            for user_id, up, down in result.all()
        ]

    async def daily_totals(self, since: datetime) -> List[DailyVotes]:
        """Group recent votes by UTC day."""
        c = comment_votes_table.c
        day = func.date(func.timezone("UTC", c.created_at))
        stmt = (
            select(
                day,
                func.count().filter(c.vote_type == int(VoteType.UP)),
                func.count().filter(c.vote_type == int(VoteType.DOWN)),
                func.count(distinct(c.user_id)),
            )
            .where(c.created_at >= since)
            .group_by(day)
            .order_by(day)
        )
        result = await self.session.execute(stmt)
        return [
            DailyVotes(day=d, upvotes=up, downvotes=down, unique_voters=voters)
            for d, up, down, voters in result.all()
        ]
