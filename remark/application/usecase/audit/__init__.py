"""Audit use cases."""

from .list_audit_log import (
    AuditEntryItem,
    ListAuditLogRequest,
    ListAuditLogResponse,
    ListAuditLogUseCase,
)

__all__ = [
    "AuditEntryItem",
    "ListAuditLogRequest",
    "ListAuditLogResponse",
    "ListAuditLogUseCase",
]
