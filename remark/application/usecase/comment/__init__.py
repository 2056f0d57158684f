"""Comment use cases."""

from .common import CommentItem, TagItem, ThreadItem
from .create_comment import (
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
)
from .delete_comment import (
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
)
from .edit_comment import EditCommentRequest, EditCommentResponse, EditCommentUseCase
from .get_comments import GetCommentsRequest, GetCommentsResponse, GetCommentsUseCase
from .get_thread import GetThreadRequest, GetThreadResponse, GetThreadUseCase
from .list_tags import ListTagsRequest, ListTagsResponse, ListTagsUseCase
from .remove_tag import RemoveTagRequest, RemoveTagResponse, RemoveTagUseCase
from .tag_comment import TagCommentRequest, TagCommentResponse, TagCommentUseCase

__all__ = [
    "CommentItem",
    "TagItem",
    "ThreadItem",
    "CreateCommentRequest",
    "CreateCommentResponse",
    "CreateCommentUseCase",
    "DeleteCommentRequest",
    "DeleteCommentResponse",
    "DeleteCommentUseCase",
    "EditCommentRequest",
    "EditCommentResponse",
    "EditCommentUseCase",
    "GetCommentsRequest",
    "GetCommentsResponse",
    "GetCommentsUseCase",
    "GetThreadRequest",
    "GetThreadResponse",
    "GetThreadUseCase",
    "ListTagsRequest",
    "ListTagsResponse",
    "ListTagsUseCase",
    "RemoveTagRequest",
    "RemoveTagResponse",
    "RemoveTagUseCase",
    "TagCommentRequest",
    "TagCommentResponse",
    "TagCommentUseCase",
]
