"""Moderation use cases."""

from .ban_user import BanUserRequest, BanUserUseCase, LiftBanRequest, LiftBanUseCase
from .change_role import ChangeRoleRequest, ChangeRoleUseCase
from .clear_warnings import ClearWarningsRequest, ClearWarningsUseCase
from .common import ModerationRecordItem, ModerationState
from .get_history import (
    GetModerationHistoryRequest,
    GetModerationHistoryResponse,
    GetModerationHistoryUseCase,
)
from .list_users import (
    ListUsersRequest,
    ListUsersResponse,
    ListUsersUseCase,
    UserListItem,
)
from .shadow_ban import (
    LiftShadowBanRequest,
    LiftShadowBanUseCase,
    ShadowBanRequest,
    ShadowBanUseCase,
)
from .warn_user import WarnUserRequest, WarnUserResponse, WarnUserUseCase

__all__ = [
    "BanUserRequest",
    "BanUserUseCase",
    "ChangeRoleRequest",
    "ChangeRoleUseCase",
    "ClearWarningsRequest",
    "ClearWarningsUseCase",
    "GetModerationHistoryRequest",
    "GetModerationHistoryResponse",
    "GetModerationHistoryUseCase",
    "LiftBanRequest",
    "LiftBanUseCase",
    "LiftShadowBanRequest",
    "LiftShadowBanUseCase",
    "ListUsersRequest",
    "ListUsersResponse",
    "ListUsersUseCase",
    "ModerationRecordItem",
    "ModerationState",
    "ShadowBanRequest",
    "ShadowBanUseCase",
    "UserListItem",
    "WarnUserRequest",
    "WarnUserResponse",
    "WarnUserUseCase",
]
