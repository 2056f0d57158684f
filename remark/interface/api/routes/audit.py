"""Audit log routes."""

from typing import Optional

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query

from remark.application.usecase.audit import (
    ListAuditLogRequest,
    ListAuditLogResponse,
    ListAuditLogUseCase,
)
from remark.interface.api.credential import require_credential

router = APIRouter(prefix="/audit-log", tags=["audit"], route_class=DishkaRoute)


@router.get("", response_model=ListAuditLogResponse)
async def list_audit_log(
    list_audit_log_use_case: FromDishka[ListAuditLogUseCase],
    actor_id: Optional[int] = None,
    action: Optional[str] = None,
    target_type: Optional[str] = None,
    target_id: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=100),
    credential: str = Depends(require_credential),
) -> ListAuditLogResponse:
    """List audit entries, newest first. Admins only."""
    return await list_audit_log_use_case.execute(
        ListAuditLogRequest(
            credential=credential,
            actor_id=actor_id,
            action=action,
            target_type=target_type,
            target_id=target_id,
            page=page,
            limit=limit,
        )
    )
