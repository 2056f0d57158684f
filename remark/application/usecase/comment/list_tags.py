"""List tags use case."""

from uuid import UUID

from pydantic import BaseModel

from remark.application.usecase.base import BaseUseCase
from remark.domain.service import CommentService
from remark.domain.value import CommentId

from .common import TagItem, to_tag_item


class ListTagsRequest(BaseModel):
    """List tags request."""

    comment_id: str


class ListTagsResponse(BaseModel):
    """List tags response."""

    comment_id: str
    tags: list[TagItem]


class ListTagsUseCase(BaseUseCase):
    """Use case for listing a comment's unexpired tags."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize list tags use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: ListTagsRequest) -> ListTagsResponse:
        """Execute list tags flow.

        Raises:
            NotFoundError: If the comment does not exist
        """
        tags = await self.comment_service.list_tags(CommentId(UUID(request.comment_id)))
        return ListTagsResponse(
            comment_id=request.comment_id,
            tags=[to_tag_item(tag) for tag in tags],
        )
