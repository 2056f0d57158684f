"""Tag comment use case."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import CommentService
from remark.domain.value import ActionType, CommentId, TagType

from .common import TagItem, to_tag_item


class TagCommentRequest(BaseModel):
    """Tag comment request."""

    credential: str
    comment_id: str
    tag_type: TagType
    expires_at: Optional[datetime] = None


class TagCommentResponse(TagItem):
    """Tag comment response."""

    pass


class TagCommentUseCase(BaseUseCase):
    """Use case for tagging a comment as a spoiler, a warning or pinned."""

    def __init__(
        self, access_gate: AccessGate, comment_service: CommentService
    ) -> None:
        """Initialize tag comment use case.

        Args:
            access_gate: Caller resolution and write admission
            comment_service: Comment domain service
        """
        self.access_gate = access_gate
        self.comment_service = comment_service

    async def execute(self, request: TagCommentRequest) -> TagCommentResponse:
        """Execute tag comment flow.

        Tagging twice with the same type replaces the earlier tag.

        Raises:
            PermissionDeniedError: If the caller may not tag comments
            NotFoundError: If the comment does not exist
            CommentDeletedError: If the comment is deleted
        """
        actor = await self.access_gate.admit(request.credential, ActionType.TAG)
        tag = await self.comment_service.tag_comment(
            actor=actor,
            comment_id=CommentId(UUID(request.comment_id)),
            tag_type=request.tag_type,
            expires_at=request.expires_at,
        )
        return TagCommentResponse(**to_tag_item(tag).model_dump())
