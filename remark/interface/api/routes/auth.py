"""Authentication routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends

from remark.application.usecase.auth import (
    AuthenticateRequest,
    AuthenticateResponse,
    AuthenticateUseCase,
    GetCurrentUserRequest,
    GetCurrentUserResponse,
    GetCurrentUserUseCase,
)
from remark.interface.api.credential import require_credential

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


@router.post("/verify", response_model=AuthenticateResponse)
async def verify(
    authenticate_use_case: FromDishka[AuthenticateUseCase],
    credential: str = Depends(require_credential),
) -> AuthenticateResponse:
    """Verify the bearer token and sync the caller's profile.

    Returns:
        The caller's profile and moderation flags
    """
    return await authenticate_use_case.execute(
        AuthenticateRequest(credential=credential)
    )


@router.get("/me", response_model=GetCurrentUserResponse)
async def get_me(
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credential: str = Depends(require_credential),
) -> GetCurrentUserResponse:
    """Get the caller's profile together with their permissions."""
    return await get_current_user_use_case.execute(
        GetCurrentUserRequest(credential=credential)
    )
