"""Comment domain service.

Owns the shape of comment threads: depth and root are fixed from the
parent at creation, deletion is soft and never touches replies, and
threads are read back level by level with an explicit depth budget.
"""

from collections import deque
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4

import logfire

from remark.config import CommentSettings
from remark.domain.error import (
    CommentDeletedError,
    DepthLimitExceededError,
    MediaMismatchError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from remark.domain.model import (
    DELETED_MARKER,
    Comment,
    CommentTag,
    EditHistoryEntry,
    User,
)
from remark.domain.repository import CommentRepository, CommentTagRepository
from remark.domain.value import (
    CommentId,
    CommentSort,
    MediaRef,
    Permission,
    TagType,
    UserId,
)
from remark.util.time import utcnow

from .audit_service import AuditService
from .base import Service
from .moderation_service import ModerationService


@dataclass
class ThreadNode:
    """A comment with the replies fetched beneath it.

    ``reply_count`` counts all direct replies, including any beyond the
    fetched depth.
    """

    comment: Comment
    replies: list["ThreadNode"] = field(default_factory=list)
    reply_count: int = 0


@dataclass
class CommentPage:
    """A page of top-level comments with their reply trees."""

    items: list[ThreadNode]
    total: int
    page: int
    limit: int

    @property
    def has_more(self) -> bool:
        """Whether later pages exist."""
        return self.page * self.limit < self.total


class CommentService(Service):
    """Domain service for comment operations."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        tag_repository: CommentTagRepository,
        moderation_service: ModerationService,
        audit_service: AuditService,
        settings: CommentSettings,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            tag_repository: Comment tag repository
            moderation_service: Permission checks
            audit_service: Audit sink
            settings: Comment limits
        """
        self.comment_repository = comment_repository
        self.tag_repository = tag_repository
        self.moderation_service = moderation_service
        self.audit_service = audit_service
        self.settings = settings

    def _validate_content(self, content: str) -> str:
        content = (content or "").strip()
        if not content:
            raise ValidationError("Comment content is required")
        if len(content) > self.settings.max_content_length:
            raise ValidationError(
                "Comment content must be "
                f"{self.settings.max_content_length} characters or less"
            )
        return content

    async def get_comment(self, comment_id: CommentId) -> Comment:
        """Get a comment by ID.

        Raises:
            NotFoundError: If the comment does not exist
        """
        comment = await self.comment_repository.find_by_id(comment_id)
        if not comment:
            raise NotFoundError("Comment", str(comment_id))
        return comment

    async def create_comment(
        self,
        author: User,
        media: MediaRef,
        content: str,
        parent_id: Optional[CommentId] = None,
    ) -> Comment:
        """Create a top-level comment or a reply.

        Deleted comments remain valid reply targets.

        Args:
            author: Author (already through the write gate)
            media: Media item the thread belongs to
            content: Comment text
            parent_id: Parent comment ID for replies (None for top-level)

        Returns:
            Created comment

        Raises:
            ValidationError: If the content is empty or too long
            NotFoundError: If the parent does not exist
            MediaMismatchError: If the parent is on another media item
            DepthLimitExceededError: If the reply would nest too deep
        """
        with logfire.span(
            "comment_service.create_comment",
            author_id=author.id,
            media_id=media.media_id,
            parent_id=str(parent_id) if parent_id else None,
        ):
            self.moderation_service.require_permission(
                author, Permission.CREATE_COMMENT
            )
            content = self._validate_content(content)

            depth_level = 0
            root_comment_id = None
            if parent_id:
                parent = await self.comment_repository.find_by_id(parent_id)
                if not parent:
                    logfire.warn("Parent comment not found", parent_id=str(parent_id))
                    raise NotFoundError("Parent comment", str(parent_id))
                if parent.media != media:
                    logfire.warn(
                        "Parent comment belongs to another media item",
                        parent_id=str(parent_id),
                        parent_media_id=parent.media_id,
                        media_id=media.media_id,
                    )
                    raise MediaMismatchError(
                        "Parent comment belongs to a different media item"
                    )
                if parent.depth_level >= self.settings.max_depth:
                    logfire.warn(
                        "Reply depth limit reached",
                        parent_id=str(parent_id),
                        parent_depth=parent.depth_level,
                    )
                    raise DepthLimitExceededError(self.settings.max_depth)
                if parent.is_deleted:
                    logfire.info(
                        "Reply to deleted comment", parent_id=str(parent_id)
                    )

                depth_level = parent.depth_level + 1
                root_comment_id = parent.thread_root_id

            now = utcnow()
            comment = Comment(
                id=CommentId(uuid4()),
                media_id=media.media_id,
                media_type=media.media_type,
                author_id=author.id,
                parent_comment_id=parent_id,
                root_comment_id=root_comment_id,
                depth_level=depth_level,
                content=content,
                created_at=now,
                updated_at=now,
            )
            saved = await self.comment_repository.save(comment)

            await self.audit_service.record(
                author.id,
                "CREATE_COMMENT",
                "comment",
                str(saved.id),
                {
                    "media_id": media.media_id,
                    "media_type": media.media_type.value,
                    "parent_comment_id": str(parent_id) if parent_id else None,
                    "depth_level": depth_level,
                },
            )
            logfire.info(
                "Comment created",
                comment_id=str(saved.id),
                author_id=author.id,
                media_id=media.media_id,
                depth_level=depth_level,
            )
            return saved

    async def soft_delete(
        self, actor: User, comment_id: CommentId, reason: Optional[str] = None
    ) -> Comment:
        """Mark a comment deleted and mask its content.

        Replies are left untouched and keep their parent link.

        Raises:
            NotFoundError: If the comment does not exist
            CommentDeletedError: If it is already deleted
            PermissionDeniedError: If the actor may not delete it
        """
        with logfire.span(
            "comment_service.soft_delete",
            comment_id=str(comment_id),
            actor_id=actor.id,
        ):
            comment = await self.get_comment(comment_id)
            if comment.is_deleted:
                raise CommentDeletedError(str(comment_id))

            if not await self.moderation_service.can_delete_comment(actor, comment):
                logfire.warn(
                    "Comment deletion denied",
                    comment_id=str(comment_id),
                    actor_id=actor.id,
                    author_id=comment.author_id,
                )
                raise PermissionDeniedError("Not allowed to delete this comment")

            is_own = comment.author_id == actor.id
            reason = (reason or "").strip() or (
                "Deleted by author" if is_own else "Deleted by moderator"
            )
            now = utcnow()
            deleted = comment.model_copy(
                update={
                    "is_deleted": True,
                    "deleted_by": actor.id,
                    "delete_reason": reason,
                    "deleted_at": now,
                    "content": DELETED_MARKER,
                    "updated_at": now,
                }
            )
            saved = await self.comment_repository.save(deleted)

            await self.audit_service.record(
                actor.id,
                "DELETE_COMMENT",
                "comment",
                str(comment_id),
                {
                    "original_content": comment.content,
                    "author_id": comment.author_id,
                    "reason": reason,
                    "moderator_action": not is_own,
                },
            )
            logfire.info(
                "Comment deleted",
                comment_id=str(comment_id),
                actor_id=actor.id,
                moderator_action=not is_own,
            )
            return saved

    async def edit_comment(
        self,
        actor: User,
        comment_id: CommentId,
        content: str,
        reason: Optional[str] = None,
    ) -> Comment:
        """Replace a comment's content, keeping the old content in history.

        Raises:
            NotFoundError: If the comment does not exist
            CommentDeletedError: If the comment is deleted
            PermissionDeniedError: If the actor is not the author
            ValidationError: If the new content is empty or too long
        """
        with logfire.span(
            "comment_service.edit_comment",
            comment_id=str(comment_id),
            actor_id=actor.id,
        ):
            comment = await self.get_comment(comment_id)
            if comment.is_deleted:
                raise CommentDeletedError(str(comment_id))
            if not self.moderation_service.can_edit_comment(actor, comment):
                logfire.warn(
                    "Comment edit denied",
                    comment_id=str(comment_id),
                    actor_id=actor.id,
                    author_id=comment.author_id,
                )
                raise PermissionDeniedError("Only the author can edit this comment")

            content = self._validate_content(content)
            now = utcnow()
            entry = EditHistoryEntry(
                content=comment.content,
                edited_at=now,
                reason=(reason or "").strip() or None,
            )
            edited = comment.model_copy(
                update={
                    "content": content,
                    "is_edited": True,
                    "edit_history": comment.edit_history + (entry,),
                    "updated_at": now,
                }
            )
            saved = await self.comment_repository.save(edited)

            await self.audit_service.record(
                actor.id,
                "EDIT_COMMENT",
                "comment",
                str(comment_id),
                {"previous_content": comment.content, "reason": entry.reason},
            )
            logfire.info(
                "Comment edited",
                comment_id=str(comment_id),
                edits=len(saved.edit_history),
            )
            return saved

    # ------------------------------------------------------------------
    # Reading threads
    # ------------------------------------------------------------------

    async def walk_replies(
        self,
        root_ids: list[CommentId],
        max_depth: int,
        include_deleted: bool = True,
    ) -> AsyncIterator[Comment]:
        """Yield replies beneath the given comments, level by level.

        Uses a queue of pending levels instead of recursion, so deep
        threads cost one query per level. At most ``max_depth`` levels are
        visited, never more than the write-time depth limit. Iterating
        again re-reads the store.

        Args:
            root_ids: Comments whose replies to walk
            max_depth: Number of reply levels to descend
            include_deleted: Whether deleted replies (and their subtrees)
                are included

        Yields:
            Replies in breadth-first order, oldest first within a level
        """
        budget = min(max(max_depth, 0), self.settings.max_depth)
        pending: deque[tuple[int, list[CommentId]]] = deque()
        if root_ids:
            pending.append((1, list(root_ids)))

        while pending:
            level, parent_ids = pending.popleft()
            if level > budget:
                break

            replies = await self.comment_repository.find_replies(
                parent_ids, include_deleted=include_deleted
            )
            for reply in replies:
                yield reply

            if replies:
                pending.append((level + 1, [r.id for r in replies]))

    async def _assemble(
        self, roots: list[Comment], max_depth: int, include_deleted: bool
    ) -> list[ThreadNode]:
        nodes = {root.id: ThreadNode(comment=root) for root in roots}
        async for reply in self.walk_replies(
            [root.id for root in roots], max_depth, include_deleted
        ):
            node = ThreadNode(comment=reply)
            nodes[reply.id] = node
            nodes[reply.parent_comment_id].replies.append(node)

        counts = await self.comment_repository.count_replies(
            list(nodes), include_deleted=include_deleted
        )
        for comment_id, node in nodes.items():
            node.reply_count = counts.get(comment_id, 0)

        return [nodes[root.id] for root in roots]

    async def fetch_thread(
        self,
        comment_id: CommentId,
        max_depth: Optional[int] = None,
        include_deleted: bool = True,
    ) -> ThreadNode:
        """Fetch a comment and the replies beneath it.

        Args:
            comment_id: Comment to start from (any depth)
            max_depth: Reply levels to include (defaults to the depth limit)
            include_deleted: Whether deleted replies are included

        Raises:
            NotFoundError: If the comment does not exist
        """
        with logfire.span(
            "comment_service.fetch_thread",
            comment_id=str(comment_id),
            max_depth=max_depth,
        ):
            root = await self.get_comment(comment_id)
            depth = self.settings.max_depth if max_depth is None else max_depth
            [node] = await self._assemble([root], depth, include_deleted)
            return node

    async def fetch_top_level(
        self,
        media: MediaRef,
        page: int = 1,
        limit: Optional[int] = None,
        sort: CommentSort = CommentSort.NEWEST,
        max_depth: Optional[int] = None,
        include_deleted: bool = True,
    ) -> CommentPage:
        """Fetch a page of top-level comments with nested replies.

        Args:
            media: Media item
            page: 1-based page number
            limit: Page size, capped at the configured maximum
            sort: newest, oldest or top
            max_depth: Reply levels below each top-level comment
            include_deleted: Whether deleted comments are included

        Raises:
            ValidationError: If the page number is not positive
        """
        with logfire.span(
            "comment_service.fetch_top_level",
            media_id=media.media_id,
            page=page,
            sort=sort.value,
        ):
            if page < 1:
                raise ValidationError("Page must be 1 or greater")
            limit = limit or self.settings.default_page_size
            limit = min(max(limit, 1), self.settings.max_page_size)
            depth = (
                self.settings.default_fetch_depth if max_depth is None else max_depth
            )

            roots = await self.comment_repository.find_top_level(
                media,
                sort=sort,
                limit=limit,
                offset=(page - 1) * limit,
                include_deleted=include_deleted,
            )
            total = await self.comment_repository.count_top_level(
                media, include_deleted=include_deleted
            )
            items = await self._assemble(roots, depth, include_deleted)

            logfire.info(
                "Top-level comments fetched",
                media_id=media.media_id,
                count=len(items),
                total=total,
            )
            return CommentPage(items=items, total=total, page=page, limit=limit)

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    async def tag_comment(
        self,
        actor: User,
        comment_id: CommentId,
        tag_type: TagType,
        expires_at: Optional[datetime] = None,
    ) -> CommentTag:
        """Tag a comment, replacing any existing tag of the same type.

        PINNED also sets the comment's pin flag and expiry.

        Raises:
            PermissionDeniedError: If the actor may not tag comments
            NotFoundError: If the comment does not exist
            CommentDeletedError: If the comment is deleted
        """
        with logfire.span(
            "comment_service.tag_comment",
            comment_id=str(comment_id),
            tag_type=tag_type.value,
        ):
            self.moderation_service.require_permission(actor, Permission.TAG_COMMENT)
            comment = await self.get_comment(comment_id)
            if comment.is_deleted:
                raise CommentDeletedError(str(comment_id))

            now = utcnow()
            if expires_at and expires_at <= now:
                raise ValidationError("Tag expiry must be in the future")

            tag = await self.tag_repository.upsert(
                CommentTag(
                    comment_id=comment_id,
                    tag_type=tag_type,
                    tagged_by=actor.id,
                    expires_at=expires_at,
                    created_at=now,
                )
            )
            if tag_type == TagType.PINNED:
                await self.comment_repository.save(
                    comment.model_copy(
                        update={
                            "is_pinned": True,
                            "pin_expires": expires_at,
                            "updated_at": now,
                        }
                    )
                )

            await self.audit_service.record(
                actor.id,
                f"TAG_{tag_type.value}",
                "comment",
                str(comment_id),
                {"expires_at": expires_at.isoformat() if expires_at else None},
            )
            logfire.info(
                "Comment tagged",
                comment_id=str(comment_id),
                tag_type=tag_type.value,
                actor_id=actor.id,
            )
            return tag

    async def remove_tag(
        self, actor: User, comment_id: CommentId, tag_type: TagType
    ) -> bool:
        """Remove a tag. Removing PINNED also unpins the comment.

        Returns:
            True if a tag was removed
        """
        with logfire.span(
            "comment_service.remove_tag",
            comment_id=str(comment_id),
            tag_type=tag_type.value,
        ):
            self.moderation_service.require_permission(actor, Permission.TAG_COMMENT)
            comment = await self.get_comment(comment_id)

            removed = await self.tag_repository.delete(comment_id, tag_type)
            if tag_type == TagType.PINNED and comment.is_pinned:
                await self.comment_repository.save(
                    comment.model_copy(
                        update={
                            "is_pinned": False,
                            "pin_expires": None,
                            "updated_at": utcnow(),
                        }
                    )
                )

            if removed:
                await self.audit_service.record(
                    actor.id,
                    f"UNTAG_{tag_type.value}",
                    "comment",
                    str(comment_id),
                )
            return removed

    async def list_tags(self, comment_id: CommentId) -> list[CommentTag]:
        """List a comment's unexpired tags."""
        await self.get_comment(comment_id)
        now = utcnow()
        tags = await self.tag_repository.find_by_comment(comment_id)
        return [tag for tag in tags if tag.is_active(now)]

    async def count_comments(self, author_id: UserId) -> int:
        """Count an author's live comments."""
        return await self.comment_repository.count_by_author(author_id)
