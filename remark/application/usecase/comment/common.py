"""Comment views shared by the comment use cases."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from remark.domain.model import Comment, CommentTag
from remark.domain.service import ThreadNode
from remark.domain.value import CommentId, MediaType, TagType, VoteState
from remark.util.time import utcnow


class CommentItem(BaseModel):
    """Comment as returned to readers. Deleted content is masked."""

    comment_id: str
    media_id: int
    media_type: MediaType
    author_id: int
    parent_comment_id: Optional[str]
    root_comment_id: Optional[str]
    depth_level: int
    content: str
    upvotes: int
    downvotes: int
    total_votes: int
    is_deleted: bool
    delete_reason: Optional[str]
    is_edited: bool
    edit_count: int
    is_pinned: bool
    pin_expires: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class ThreadItem(CommentItem):
    """Comment with the replies fetched beneath it."""

    reply_count: int
    user_vote: VoteState = VoteState.NONE
    replies: list["ThreadItem"] = []


class TagItem(BaseModel):
    """Moderation tag on a comment."""

    comment_id: str
    tag_type: TagType
    tagged_by: int
    expires_at: Optional[datetime]
    created_at: datetime


def to_comment_item(
    comment: Comment, now: Optional[datetime] = None
) -> CommentItem:
    """Build the reader view of a comment."""
    now = now or utcnow()
    return CommentItem(**_comment_fields(comment, now))


def to_thread_item(
    node: ThreadNode,
    user_votes: dict[CommentId, VoteState],
    now: Optional[datetime] = None,
) -> ThreadItem:
    """Build the reader view of a thread node and everything beneath it."""
    now = now or utcnow()
    return ThreadItem(
        **_comment_fields(node.comment, now),
        reply_count=node.reply_count,
        user_vote=user_votes.get(node.comment.id, VoteState.NONE),
        replies=[to_thread_item(reply, user_votes, now) for reply in node.replies],
    )


def to_tag_item(tag: CommentTag) -> TagItem:
    """Build the view of a tag."""
    return TagItem(
        comment_id=str(tag.comment_id),
        tag_type=tag.tag_type,
        tagged_by=tag.tagged_by,
        expires_at=tag.expires_at,
        created_at=tag.created_at,
    )


def collect_ids(nodes: list[ThreadNode]) -> list[CommentId]:
    """Ids of every comment in the given trees, parents before replies."""
    ids: list[CommentId] = []
    pending = list(nodes)
    while pending:
        node = pending.pop(0)
        ids.append(node.comment.id)
        pending.extend(node.replies)
    return ids


def _comment_fields(comment: Comment, now: datetime) -> dict:
    return {
        "comment_id": str(comment.id),
        "media_id": comment.media_id,
        "media_type": comment.media_type,
        "author_id": comment.author_id,
        "parent_comment_id": (
            str(comment.parent_comment_id) if comment.parent_comment_id else None
        ),
        "root_comment_id": (
            str(comment.root_comment_id) if comment.root_comment_id else None
        ),
        "depth_level": comment.depth_level,
        "content": comment.visible_content,
        "upvotes": comment.upvotes,
        "downvotes": comment.downvotes,
        "total_votes": comment.total_votes,
        "is_deleted": comment.is_deleted,
        "delete_reason": comment.delete_reason,
        "is_edited": comment.is_edited,
        "edit_count": len(comment.edit_history),
        "is_pinned": comment.is_pin_active(now),
        "pin_expires": comment.pin_expires,
        "created_at": comment.created_at,
        "updated_at": comment.updated_at,
    }
