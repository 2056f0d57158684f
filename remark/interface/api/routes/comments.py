"""Comment routes."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from remark.application.usecase.comment import (
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
    EditCommentRequest,
    EditCommentResponse,
    EditCommentUseCase,
    GetCommentsRequest,
    GetCommentsResponse,
    GetCommentsUseCase,
    GetThreadRequest,
    GetThreadResponse,
    GetThreadUseCase,
    ListTagsRequest,
    ListTagsResponse,
    ListTagsUseCase,
    RemoveTagRequest,
    RemoveTagResponse,
    RemoveTagUseCase,
    TagCommentRequest,
    TagCommentResponse,
    TagCommentUseCase,
)
from remark.domain.value import CommentSort, MediaType, TagType
from remark.interface.api.credential import bearer_credential, require_credential

router = APIRouter(prefix="/comments", tags=["comments"], route_class=DishkaRoute)


class CreateCommentAPIRequest(BaseModel):
    """API request for creating a comment."""

    media_id: int = Field(gt=0)
    media_type: MediaType = MediaType.ANIME
    content: str
    parent_id: UUID | None = None  # Parent comment ID for replies


class EditCommentAPIRequest(BaseModel):
    """API request for editing a comment."""

    content: str
    reason: str | None = None


class TagCommentAPIRequest(BaseModel):
    """API request for tagging a comment."""

    tag_type: TagType
    expires_at: datetime | None = None  # Only meaningful for PINNED


@router.get("", response_model=GetCommentsResponse)
async def get_comments(
    get_comments_use_case: FromDishka[GetCommentsUseCase],
    media_id: int = Query(gt=0),
    media_type: MediaType = MediaType.ANIME,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    sort: CommentSort = CommentSort.NEWEST,
    max_depth: Optional[int] = Query(default=None, ge=0),
    include_deleted: bool = True,
    credential: Optional[str] = Depends(bearer_credential),
) -> GetCommentsResponse:
    """Get a page of top-level comments for a media item with their replies.

    If authenticated, includes the caller's vote on each comment.
    """
    request = GetCommentsRequest(
        media_id=media_id,
        media_type=media_type,
        page=page,
        limit=limit,
        sort=sort,
        max_depth=max_depth,
        include_deleted=include_deleted,
        credential=credential,
    )
    return await get_comments_use_case.execute(request)


@router.post(
    "", response_model=CreateCommentResponse, status_code=status.HTTP_201_CREATED
)
async def create_comment(
    request: CreateCommentAPIRequest,
    create_comment_use_case: FromDishka[CreateCommentUseCase],
    credential: str = Depends(require_credential),
) -> CreateCommentResponse:
    """Create a comment on a media item or reply to another comment.

    Requires authentication.

    Args:
        request: Comment creation data
        create_comment_use_case: Create comment use case from DI
        credential: Bearer token

    Returns:
        Created comment details
    """
    use_case_request = CreateCommentRequest(
        credential=credential,
        media_id=request.media_id,
        media_type=request.media_type,
        content=request.content,
        parent_id=str(request.parent_id) if request.parent_id else None,
    )
    return await create_comment_use_case.execute(use_case_request)


@router.get("/{comment_id}/thread", response_model=GetThreadResponse)
async def get_thread(
    comment_id: UUID,
    get_thread_use_case: FromDishka[GetThreadUseCase],
    max_depth: Optional[int] = Query(default=None, ge=0),
    include_deleted: bool = True,
    credential: Optional[str] = Depends(bearer_credential),
) -> GetThreadResponse:
    """Get a comment with the replies beneath it."""
    request = GetThreadRequest(
        comment_id=str(comment_id),
        max_depth=max_depth,
        include_deleted=include_deleted,
        credential=credential,
    )
    return await get_thread_use_case.execute(request)


@router.patch("/{comment_id}", response_model=EditCommentResponse)
async def edit_comment(
    comment_id: UUID,
    request: EditCommentAPIRequest,
    edit_comment_use_case: FromDishka[EditCommentUseCase],
    credential: str = Depends(require_credential),
) -> EditCommentResponse:
    """Edit a comment's content.

    Only the comment author can edit. The previous content is kept in the
    comment's edit history.
    """
    use_case_request = EditCommentRequest(
        credential=credential,
        comment_id=str(comment_id),
        content=request.content,
        reason=request.reason,
    )
    return await edit_comment_use_case.execute(use_case_request)


@router.delete("/{comment_id}", response_model=DeleteCommentResponse)
async def delete_comment(
    comment_id: UUID,
    delete_comment_use_case: FromDishka[DeleteCommentUseCase],
    reason: Optional[str] = None,
    credential: str = Depends(require_credential),
) -> DeleteCommentResponse:
    """Soft-delete a comment.

    Authors can delete their own comments, moderators can delete any.
    Replies stay in place beneath the tombstone.
    """
    use_case_request = DeleteCommentRequest(
        credential=credential, comment_id=str(comment_id), reason=reason
    )
    return await delete_comment_use_case.execute(use_case_request)


@router.get("/{comment_id}/tags", response_model=ListTagsResponse)
async def list_tags(
    comment_id: UUID,
    list_tags_use_case: FromDishka[ListTagsUseCase],
) -> ListTagsResponse:
    """List the moderation tags on a comment."""
    return await list_tags_use_case.execute(
        ListTagsRequest(comment_id=str(comment_id))
    )


@router.post(
    "/{comment_id}/tags",
    response_model=TagCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def tag_comment(
    comment_id: UUID,
    request: TagCommentAPIRequest,
    tag_comment_use_case: FromDishka[TagCommentUseCase],
    credential: str = Depends(require_credential),
) -> TagCommentResponse:
    """Tag a comment as a spoiler, a warning or pinned. Moderators only."""
    use_case_request = TagCommentRequest(
        credential=credential,
        comment_id=str(comment_id),
        tag_type=request.tag_type,
        expires_at=request.expires_at,
    )
    return await tag_comment_use_case.execute(use_case_request)


@router.delete("/{comment_id}/tags/{tag_type}", response_model=RemoveTagResponse)
async def remove_tag(
    comment_id: UUID,
    tag_type: TagType,
    remove_tag_use_case: FromDishka[RemoveTagUseCase],
    credential: str = Depends(require_credential),
) -> RemoveTagResponse:
    """Remove a tag from a comment. Moderators only."""
    use_case_request = RemoveTagRequest(
        credential=credential, comment_id=str(comment_id), tag_type=tag_type
    )
    return await remove_tag_use_case.execute(use_case_request)
