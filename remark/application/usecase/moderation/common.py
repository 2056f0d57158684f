"""Moderation views shared by the moderation use cases."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from remark.domain.model import ModerationRecord, User
from remark.domain.value import ModerationAction, Role


class ModerationState(BaseModel):
    """A user's moderation state as seen by moderators."""

    user_id: int
    role: Role
    is_banned: bool
    ban_reason: Optional[str]
    ban_expires: Optional[datetime]
    shadow_banned: bool
    shadow_ban_expires: Optional[datetime]
    is_muted: bool
    mute_expires: Optional[datetime]
    warning_count: int
    total_warns: int


class ModerationRecordItem(BaseModel):
    """One entry of a user's moderation history."""

    record_id: str
    action: ModerationAction
    actor_id: int
    target_id: int
    reason: Optional[str]
    description: Optional[str]
    expires_at: Optional[datetime]
    old_role: Optional[Role]
    new_role: Optional[Role]
    created_at: datetime


def to_moderation_state(user: User) -> ModerationState:
    """Build the moderator view of a user."""
    return ModerationState(
        user_id=user.id,
        role=user.role,
        is_banned=user.is_banned,
        ban_reason=user.ban_reason,
        ban_expires=user.ban_expires,
        shadow_banned=user.shadow_banned,
        shadow_ban_expires=user.shadow_ban_expires,
        is_muted=user.is_muted,
        mute_expires=user.mute_expires,
        warning_count=user.warning_count,
        total_warns=user.total_warns,
    )


def to_record_item(record: ModerationRecord) -> ModerationRecordItem:
    """Build the view of a moderation record."""
    return ModerationRecordItem(
        record_id=str(record.id),
        action=record.action,
        actor_id=record.actor_id,
        target_id=record.target_id,
        reason=record.reason,
        description=record.description,
        expires_at=record.expires_at,
        old_role=record.old_role,
        new_role=record.new_role,
        created_at=record.created_at,
    )
