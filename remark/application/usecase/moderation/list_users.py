"""List users use case."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from remark.application.usecase.base import AccessGate, BaseUseCase
from remark.domain.service import CommentService, ModerationService
from remark.domain.value import UserStatus

from .common import ModerationState, to_moderation_state


class UserListItem(BaseModel):
    """A user row in the moderator user list."""

    username: str
    avatar_url: Optional[str]
    moderation: ModerationState
    rank_score: int
    comment_count: int
    created_at: datetime
    last_active: datetime


class ListUsersRequest(BaseModel):
    """List users request."""

    credential: str
    status: UserStatus = UserStatus.ALL
    search: Optional[str] = None
    page: int = 1
    limit: int = 20


class ListUsersResponse(BaseModel):
    """List users response."""

    users: list[UserListItem]
    total: int
    page: int
    limit: int
    has_more: bool


class ListUsersUseCase(BaseUseCase):
    """Use case for browsing users by moderation status."""

    def __init__(
        self,
        access_gate: AccessGate,
        moderation_service: ModerationService,
        comment_service: CommentService,
    ) -> None:
        self.access_gate = access_gate
        self.moderation_service = moderation_service
        self.comment_service = comment_service

    async def execute(self, request: ListUsersRequest) -> ListUsersResponse:
        """Execute list users flow.

        Raises:
            PermissionDeniedError: If the caller may not view reports
        """
        actor = await self.access_gate.authenticate(request.credential)
        page = max(request.page, 1)
        limit = min(max(request.limit, 1), 50)
        offset = (page - 1) * limit

        result = await self.moderation_service.list_users(
            actor,
            status=request.status,
            search=request.search or None,
            limit=limit,
            offset=offset,
        )

        users = [
            UserListItem(
                username=user.username,
                avatar_url=user.avatar_url,
                moderation=to_moderation_state(user),
                rank_score=user.rank_score,
                comment_count=await self.comment_service.count_comments(user.id),
                created_at=user.created_at,
                last_active=user.last_active,
            )
            for user in result.users
        ]
        return ListUsersResponse(
            users=users,
            total=result.total,
            page=page,
            limit=limit,
            has_more=offset + len(users) < result.total,
        )
