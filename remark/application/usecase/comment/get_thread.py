"""Get thread use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import CommentService, VoteService
from remark.domain.value import CommentId, VoteState

from .common import ThreadItem, collect_ids, to_thread_item


class GetThreadRequest(BaseModel):
    """Get thread request."""

    comment_id: str
    max_depth: Optional[int] = None  # Defaults to the nesting limit
    include_deleted: bool = True
    credential: Optional[str] = None  # Optional, for the viewer's vote state


class GetThreadResponse(BaseModel):
    """Get thread response."""

    thread: ThreadItem


class GetThreadUseCase(BaseUseCase):
    """Use case for reading a comment with the replies beneath it."""

    def __init__(
        self,
        access_gate: AccessGate,
        comment_service: CommentService,
        vote_service: VoteService,
    ) -> None:
        """Initialize get thread use case.

        Args:
            access_gate: Caller resolution
            comment_service: Comment domain service
            vote_service: Viewer vote lookups
        """
        self.access_gate = access_gate
        self.comment_service = comment_service
        self.vote_service = vote_service

    async def execute(self, request: GetThreadRequest) -> GetThreadResponse:
        """Execute get thread flow.

        Raises:
            NotFoundError: If the comment does not exist
        """
        node = await self.comment_service.fetch_thread(
            CommentId(UUID(request.comment_id)),
            max_depth=request.max_depth,
            include_deleted=request.include_deleted,
        )

        user_votes: dict[CommentId, VoteState] = {}
        viewer = await self.access_gate.identify(request.credential)
        if viewer:
            user_votes = await self.vote_service.get_user_votes(
                viewer.id, collect_ids([node])
            )

        return GetThreadResponse(thread=to_thread_item(node, user_votes))
