"""Rate limit routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends

from remark.application.usecase.rate_limit import (
    GetRateLimitStatusRequest,
    GetRateLimitStatusResponse,
    GetRateLimitStatusUseCase,
)
from remark.interface.api.credential import require_credential

router = APIRouter(
    prefix="/rate-limits", tags=["rate limits"], route_class=DishkaRoute
)


@router.get("", response_model=GetRateLimitStatusResponse)
async def get_rate_limit_status(
    get_status_use_case: FromDishka[GetRateLimitStatusUseCase],
    credential: str = Depends(require_credential),
) -> GetRateLimitStatusResponse:
    """Get how much of each action budget the caller has used."""
    return await get_status_use_case.execute(
        GetRateLimitStatusRequest(credential=credential)
    )
