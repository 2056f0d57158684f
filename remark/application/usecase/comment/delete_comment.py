"""Delete comment use case."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import CommentService, ReputationService
from remark.domain.value import ActionType, CommentId


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    credential: str
    comment_id: str
    reason: Optional[str] = None


class DeleteCommentResponse(BaseModel):
    """Delete comment response."""

    comment_id: str
    is_deleted: bool
    deleted_by: int
    delete_reason: Optional[str]
    deleted_at: Optional[datetime]


class DeleteCommentUseCase(BaseUseCase):
    """Use case for soft-deleting a comment.

    Replies are kept and stay attached to the deleted comment.
    """

    def __init__(
        self,
        access_gate: AccessGate,
        comment_service: CommentService,
        reputation_service: ReputationService,
    ) -> None:
        """Initialize delete comment use case.

        Args:
            access_gate: Caller resolution and write admission
            comment_service: Comment domain service
            reputation_service: Author rank updates
        """
        self.access_gate = access_gate
        self.comment_service = comment_service
        self.reputation_service = reputation_service

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        """Execute delete comment flow.

        Raises:
            NotFoundError: If the comment does not exist
            CommentDeletedError: If it is already deleted
            PermissionDeniedError: If the caller may not delete it
        """
        actor = await self.access_gate.admit(request.credential, ActionType.DELETE)
        comment = await self.comment_service.soft_delete(
            actor=actor,
            comment_id=CommentId(UUID(request.comment_id)),
            reason=request.reason,
        )

        await self.reputation_service.record_comment_change(comment.author_id)

        return DeleteCommentResponse(
            comment_id=str(comment.id),
            is_deleted=comment.is_deleted,
            deleted_by=actor.id,
            delete_reason=comment.delete_reason,
            deleted_at=comment.deleted_at,
        )
