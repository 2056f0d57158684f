"""Get comments use case."""

from typing import Optional

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import CommentService, VoteService
from remark.domain.value import (
    CommentId,
    CommentSort,
    MediaId,
    MediaRef,
    MediaType,
    VoteState,
)

from .common import ThreadItem, collect_ids, to_thread_item


class GetCommentsRequest(BaseModel):
    """Get comments request."""

    media_id: int
    media_type: MediaType = MediaType.ANIME
    page: int = 1
    limit: Optional[int] = None
    sort: CommentSort = CommentSort.NEWEST
    max_depth: Optional[int] = None
    include_deleted: bool = True
    credential: Optional[str] = None  # Optional, for the viewer's vote state


class GetCommentsResponse(BaseModel):
    """Get comments response."""

    media_id: int
    media_type: MediaType
    comments: list[ThreadItem]
    total: int
    page: int
    limit: int
    has_more: bool


class GetCommentsUseCase(BaseUseCase):
    """Use case for reading a page of top-level comments with their replies."""

    def __init__(
        self,
        access_gate: AccessGate,
        comment_service: CommentService,
        vote_service: VoteService,
    ) -> None:
        """Initialize get comments use case.

        Args:
            access_gate: Caller resolution
            comment_service: Comment domain service
            vote_service: Viewer vote lookups
        """
        self.access_gate = access_gate
        self.comment_service = comment_service
        self.vote_service = vote_service

    async def execute(self, request: GetCommentsRequest) -> GetCommentsResponse:
        """Execute get comments flow.

        Deleted comments are returned with masked content unless excluded,
        so their replies stay nested under them.

        Args:
            request: Get comments request with media, paging and sort

        Returns:
            Page of comment trees with the viewer's vote on each node

        Raises:
            ValidationError: If the page number is not positive
        """
        media = MediaRef(
            media_id=MediaId(request.media_id), media_type=request.media_type
        )
        page = await self.comment_service.fetch_top_level(
            media,
            page=request.page,
            limit=request.limit,
            sort=request.sort,
            max_depth=request.max_depth,
            include_deleted=request.include_deleted,
        )

        # One batch query for the whole page
        user_votes: dict[CommentId, VoteState] = {}
        viewer = await self.access_gate.identify(request.credential)
        if viewer and page.items:
            user_votes = await self.vote_service.get_user_votes(
                viewer.id, collect_ids(page.items)
            )

        return GetCommentsResponse(
            media_id=request.media_id,
            media_type=request.media_type,
            comments=[to_thread_item(node, user_votes) for node in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit,
            has_more=page.has_more,
        )
