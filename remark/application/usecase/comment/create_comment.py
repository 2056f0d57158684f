"""Create comment use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import CommentService, ModerationService, ReputationService
from remark.domain.value import ActionType, CommentId, MediaId, MediaRef, MediaType

from .common import CommentItem, to_comment_item


class CreateCommentRequest(BaseModel):
    """Create comment request."""

    credential: str
    media_id: int
    media_type: MediaType = MediaType.ANIME
    content: str
    parent_id: Optional[str] = None  # Parent comment ID for replies


class CreateCommentResponse(CommentItem):
    """Create comment response."""

    pass


class CreateCommentUseCase(BaseUseCase):
    """Use case for posting a comment or replying to another comment."""

    def __init__(
        self,
        access_gate: AccessGate,
        comment_service: CommentService,
        moderation_service: ModerationService,
        reputation_service: ReputationService,
    ) -> None:
        """Initialize create comment use case.

        Args:
            access_gate: Caller resolution and write admission
            comment_service: Comment domain service
            moderation_service: Mute checks
            reputation_service: Author rank updates
        """
        self.access_gate = access_gate
        self.comment_service = comment_service
        self.moderation_service = moderation_service
        self.reputation_service = reputation_service

    async def execute(self, request: CreateCommentRequest) -> CreateCommentResponse:
        """Execute create comment flow.

        Steps:
        1. Admit the write (rate limit, then ban check)
        2. Reject muted authors
        3. Create the comment (parent, media and depth checks)
        4. Recompute the author's rank

        Args:
            request: Create comment request

        Returns:
            The new comment

        Raises:
            RateLimitedError: If the comment budget is spent
            BannedError: If the author is banned
            MutedError: If the author is muted
            NotFoundError: If the parent does not exist
            MediaMismatchError: If the parent is on another media item
            DepthLimitExceededError: If the reply would nest too deep
        """
        author = await self.access_gate.admit(request.credential, ActionType.COMMENT)
        self.moderation_service.ensure_can_comment(author)

        parent_id = CommentId(UUID(request.parent_id)) if request.parent_id else None
        comment = await self.comment_service.create_comment(
            author=author,
            media=MediaRef(
                media_id=MediaId(request.media_id), media_type=request.media_type
            ),
            content=request.content,
            parent_id=parent_id,
        )

        # Comment count is an input of the rank score
        await self.reputation_service.record_comment_change(author.id)

        return CreateCommentResponse(**to_comment_item(comment).model_dump())
