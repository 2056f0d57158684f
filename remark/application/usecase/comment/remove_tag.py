"""Remove tag use case."""

from uuid import UUID

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import CommentService
from remark.domain.value import ActionType, CommentId, TagType


class RemoveTagRequest(BaseModel):
    """Remove tag request."""

    credential: str
    comment_id: str
    tag_type: TagType


class RemoveTagResponse(BaseModel):
    """Remove tag response."""

    comment_id: str
    tag_type: TagType
    removed: bool


class RemoveTagUseCase(BaseUseCase):
    """Use case for removing a tag from a comment."""

    def __init__(
        self, access_gate: AccessGate, comment_service: CommentService
    ) -> None:
        """Initialize remove tag use case.

        Args:
            access_gate: Caller resolution and write admission
            comment_service: Comment domain service
        """
        self.access_gate = access_gate
        self.comment_service = comment_service

    async def execute(self, request: RemoveTagRequest) -> RemoveTagResponse:
        """Execute remove tag flow. Removing PINNED also unpins the comment."""
        actor = await self.access_gate.admit(request.credential, ActionType.TAG)
        removed = await self.comment_service.remove_tag(
            actor=actor,
            comment_id=CommentId(UUID(request.comment_id)),
            tag_type=request.tag_type,
        )
        return RemoveTagResponse(
            comment_id=request.comment_id,
            tag_type=request.tag_type,
            removed=removed,
        )
