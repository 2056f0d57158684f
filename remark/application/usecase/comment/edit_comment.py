"""Edit comment use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import CommentService
from remark.domain.value import ActionType, CommentId

from .common import CommentItem, to_comment_item


class EditCommentRequest(BaseModel):
    """Edit comment request."""

    credential: str
    comment_id: str
    content: str
    reason: Optional[str] = None


class EditCommentResponse(CommentItem):
    """Edit comment response."""

    pass


class EditCommentUseCase(BaseUseCase):
    """Use case for editing a comment's content."""

    def __init__(
        self, access_gate: AccessGate, comment_service: CommentService
    ) -> None:
        """Initialize edit comment use case.

        Args:
            access_gate: Caller resolution and write admission
            comment_service: Comment domain service
        """
        self.access_gate = access_gate
        self.comment_service = comment_service

    async def execute(self, request: EditCommentRequest) -> EditCommentResponse:
        """Execute edit comment flow.

        The previous content is appended to the comment's edit history.

        Raises:
            NotFoundError: If the comment does not exist
            CommentDeletedError: If the comment is deleted
            PermissionDeniedError: If the caller is not the author
        """
        actor = await self.access_gate.admit(request.credential, ActionType.EDIT)
        comment = await self.comment_service.edit_comment(
            actor=actor,
            comment_id=CommentId(UUID(request.comment_id)),
            content=request.content,
            reason=request.reason,
        )
        return EditCommentResponse(**to_comment_item(comment).model_dump())
