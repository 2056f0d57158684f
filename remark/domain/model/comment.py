"""Comment entity.

Comments are threaded replies on a media item. Each comment stores its
parent, the top-level ancestor of its thread and its depth, all fixed at
creation. Deletion is soft so that replies keep a valid parent.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from remark.domain.model.common import DomainModel
from remark.domain.value import (
    CommentId,
    MediaId,
    MediaRef,
    MediaType,
    TagType,
    UserId,
)
from remark.util.time import utcnow

# Shown in place of the content of a deleted comment
DELETED_MARKER = "[deleted]"


class EditHistoryEntry(DomainModel):
    """Content of a comment as it was before an edit."""

    content: str
    edited_at: datetime
    reason: Optional[str] = None


class CommentTag(DomainModel):
    """Moderation tag on a comment, unique per (comment, tag type)."""

    comment_id: CommentId
    tag_type: TagType
    tagged_by: UserId
    expires_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)

    def is_active(self, now: datetime) -> bool:
        """Whether the tag has not expired at ``now``."""
        return self.expires_at is None or self.expires_at > now


class Comment(DomainModel):
    """Comment entity.

    Threading is managed through:
    - parent_comment_id: Direct parent (None for top-level)
    - root_comment_id: Top-level ancestor (None for top-level)
    - depth_level: 0 for top-level, parent depth + 1 otherwise
    """

    id: CommentId
    media_id: MediaId
    media_type: MediaType = MediaType.ANIME
    author_id: UserId
    parent_comment_id: Optional[CommentId] = None
    root_comment_id: Optional[CommentId] = None
    depth_level: int = Field(default=0, ge=0)
    content: str

    # Derived from vote rows, never adjusted directly
    upvotes: int = Field(default=0, ge=0)
    downvotes: int = Field(default=0, ge=0)
    total_votes: int = Field(default=0, ge=0)

    is_deleted: bool = False
    deleted_by: Optional[UserId] = None
    delete_reason: Optional[str] = None
    deleted_at: Optional[datetime] = None

    is_edited: bool = False
    edit_history: tuple[EditHistoryEntry, ...] = ()

    is_pinned: bool = False
    pin_expires: Optional[datetime] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def media(self) -> MediaRef:
        """Media item this comment belongs to."""
        return MediaRef(media_id=self.media_id, media_type=self.media_type)

    @property
    def is_top_level(self) -> bool:
        """Whether the comment has no parent."""
        return self.parent_comment_id is None

    @property
    def thread_root_id(self) -> CommentId:
        """Id of the top-level comment of this thread."""
        return self.root_comment_id or self.id

    @property
    def visible_content(self) -> str:
        """Content as shown to readers."""
        return DELETED_MARKER if self.is_deleted else self.content

    def is_pin_active(self, now: datetime) -> bool:
        """Whether the pin applies at ``now``."""
        return self.is_pinned and (self.pin_expires is None or self.pin_expires > now)
