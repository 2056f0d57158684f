"""Moderation routes.

Every endpoint requires a moderator or higher; the use cases enforce the
exact role rules.
"""

from typing import Optional

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from remark.application.usecase.moderation import (
    BanUserRequest,
    BanUserUseCase,
    ChangeRoleRequest,
    ChangeRoleUseCase,
    ClearWarningsRequest,
    ClearWarningsUseCase,
    GetModerationHistoryRequest,
    GetModerationHistoryResponse,
    GetModerationHistoryUseCase,
    LiftBanRequest,
    LiftBanUseCase,
    LiftShadowBanRequest,
    LiftShadowBanUseCase,
    ListUsersRequest,
    ListUsersResponse,
    ListUsersUseCase,
    ModerationState,
    ShadowBanRequest,
    ShadowBanUseCase,
    WarnUserRequest,
    WarnUserResponse,
    WarnUserUseCase,
)
from remark.domain.value import Role, UserStatus
from remark.interface.api.credential import require_credential

router = APIRouter(
    prefix="/moderation/users", tags=["moderation"], route_class=DishkaRoute
)


class WarnUserAPIRequest(BaseModel):
    """API request for warning a user."""

    reason: str
    description: str | None = None


class BanAPIRequest(BaseModel):
    """API request for a ban or shadow ban."""

    reason: str
    duration_hours: int | None = None  # Omit for a permanent ban


class ChangeRoleAPIRequest(BaseModel):
    """API request for changing a user's role."""

    role: Role
    reason: str


@router.get("", response_model=ListUsersResponse)
async def list_users(
    list_users_use_case: FromDishka[ListUsersUseCase],
    status: UserStatus = UserStatus.ALL,
    search: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=50),
    credential: str = Depends(require_credential),
) -> ListUsersResponse:
    """List users, newest first, filtered by moderation status and username."""
    return await list_users_use_case.execute(
        ListUsersRequest(
            credential=credential,
            status=status,
            search=search,
            page=page,
            limit=limit,
        )
    )

@router.post("/{user_id}/warnings", response_model=WarnUserResponse)
async def warn_user(
    user_id: int,
    request: WarnUserAPIRequest,
    warn_user_use_case: FromDishka[WarnUserUseCase],
    credential: str = Depends(require_credential),
) -> WarnUserResponse:
    """Warn a user. Enough active warnings mute the user automatically."""
    return await warn_user_use_case.execute(
        WarnUserRequest(
            credential=credential,
            user_id=user_id,
            reason=request.reason,
            description=request.description,
        )
    )


@router.delete("/{user_id}/warnings", response_model=ModerationState)
async def clear_warnings(
    user_id: int,
    clear_warnings_use_case: FromDishka[ClearWarningsUseCase],
    reason: Optional[str] = None,
    credential: str = Depends(require_credential),
) -> ModerationState:
    """Reset a user's active warnings and lift any mute."""
    return await clear_warnings_use_case.execute(
        ClearWarningsRequest(credential=credential, user_id=user_id, reason=reason)
    )


@router.post("/{user_id}/ban", response_model=ModerationState)
async def ban_user(
    user_id: int,
    request: BanAPIRequest,
    ban_user_use_case: FromDishka[BanUserUseCase],
    credential: str = Depends(require_credential),
) -> ModerationState:
    """Ban a user for a number of hours, or permanently."""
    return await ban_user_use_case.execute(
        BanUserRequest(
            credential=credential,
            user_id=user_id,
            reason=request.reason,
            duration_hours=request.duration_hours,
        )
    )


@router.delete("/{user_id}/ban", response_model=ModerationState)
async def lift_ban(
    user_id: int,
    lift_ban_use_case: FromDishka[LiftBanUseCase],
    reason: Optional[str] = None,
    credential: str = Depends(require_credential),
) -> ModerationState:
    """Lift a user's ban."""
    return await lift_ban_use_case.execute(
        LiftBanRequest(credential=credential, user_id=user_id, reason=reason)
    )


@router.post("/{user_id}/shadow-ban", response_model=ModerationState)
async def shadow_ban(
    user_id: int,
    request: BanAPIRequest,
    shadow_ban_use_case: FromDishka[ShadowBanUseCase],
    credential: str = Depends(require_credential),
) -> ModerationState:
    """Shadow-ban a user. Admins only."""
    return await shadow_ban_use_case.execute(
        ShadowBanRequest(
            credential=credential,
            user_id=user_id,
            reason=request.reason,
            duration_hours=request.duration_hours,
        )
    )


@router.delete("/{user_id}/shadow-ban", response_model=ModerationState)
async def lift_shadow_ban(
    user_id: int,
    lift_shadow_ban_use_case: FromDishka[LiftShadowBanUseCase],
    reason: Optional[str] = None,
    credential: str = Depends(require_credential),
) -> ModerationState:
    """Lift a user's shadow ban. Admins only."""
    return await lift_shadow_ban_use_case.execute(
        LiftShadowBanRequest(credential=credential, user_id=user_id, reason=reason)
    )


@router.put("/{user_id}/role", response_model=ModerationState)
async def change_role(
    user_id: int,
    request: ChangeRoleAPIRequest,
    change_role_use_case: FromDishka[ChangeRoleUseCase],
    credential: str = Depends(require_credential),
) -> ModerationState:
    """Change a user's role."""
    return await change_role_use_case.execute(
        ChangeRoleRequest(
            credential=credential,
            user_id=user_id,
            role=request.role,
            reason=request.reason,
        )
    )


@router.get("/{user_id}/history", response_model=GetModerationHistoryResponse)
async def get_history(
    user_id: int,
    get_history_use_case: FromDishka[GetModerationHistoryUseCase],
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=100),
    credential: str = Depends(require_credential),
) -> GetModerationHistoryResponse:
    """Get a user's moderation state and the actions taken against them."""
    return await get_history_use_case.execute(
        GetModerationHistoryRequest(
            credential=credential, user_id=user_id, page=page, limit=limit
        )
    )
