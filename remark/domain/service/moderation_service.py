"""Moderation domain service.

Owns the role/permission table, the write gate that every mutating
request passes (ban and mute checks with lazy expiry), and the
moderation actions: warnings with automatic mute escalation, bans,
shadow bans and role changes.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import uuid4

import logfire

from remark.config import ModerationSettings
from remark.domain.error import (
    BannedError,
    MutedError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from remark.domain.model import Comment, ModerationRecord, User
from remark.domain.repository import ModerationRecordRepository, UserRepository
from remark.domain.value import (
    ModerationAction,
    ModerationRecordId,
    Permission,
    Role,
    UserId,
    UserStatus,
)
from remark.util.time import utcnow

from .audit_service import AuditService
from .base import Service

_USER_PERMISSIONS = frozenset(
    {
        Permission.READ_COMMENTS,
        Permission.CREATE_COMMENT,
        Permission.EDIT_OWN_COMMENT,
        Permission.DELETE_OWN_COMMENT,
        Permission.VOTE,
        Permission.REPORT_COMMENT,
    }
)

_MODERATOR_PERMISSIONS = _USER_PERMISSIONS | {
    Permission.DELETE_ANY_COMMENT,
    Permission.WARN_USER,
    Permission.TAG_COMMENT,
    Permission.VIEW_REPORTS,
    Permission.REVIEW_REPORTS,
    Permission.VIEW_VOTES,
}

_ADMIN_PERMISSIONS = _MODERATOR_PERMISSIONS | {
    Permission.BAN_USER,
    Permission.SHADOW_BAN_USER,
    Permission.CHANGE_ROLE,
    Permission.VIEW_AUDIT_LOG,
}

ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.USER: _USER_PERMISSIONS,
    Role.MODERATOR: _MODERATOR_PERMISSIONS,
    Role.ADMIN: _ADMIN_PERMISSIONS,
    Role.SUPER_ADMIN: frozenset(Permission),
}

# Roles an ADMIN may grant, revoke, or change away from
_ADMIN_MANAGED_ROLES = (Role.USER, Role.MODERATOR)


def escalate_warning(
    warning_count: int, settings: ModerationSettings
) -> tuple[int, Optional[timedelta]]:
    """Apply one more warning to an active warning count.

    Args:
        warning_count: Active warnings before this one
        settings: Thresholds and mute durations

    Returns:
        Tuple of (new active count, mute duration or None)
    """
    count = warning_count + 1
    if count >= settings.long_mute_threshold:
        return 0, timedelta(hours=settings.long_mute_hours)
    if count >= settings.short_mute_threshold:
        return 0, timedelta(hours=settings.short_mute_hours)
    return count, None


@dataclass(frozen=True)
class UserPage:
    """One page of a user listing."""

    users: list[User]
    total: int


@dataclass(frozen=True)
class WarningOutcome:
    """Result of warning a user."""

    user: User
    record: ModerationRecord
    muted_until: Optional[datetime]


class ModerationService(Service):
    """Domain service for permissions and moderation state transitions."""

    def __init__(
        self,
        user_repository: UserRepository,
        moderation_record_repository: ModerationRecordRepository,
        audit_service: AuditService,
        settings: ModerationSettings,
    ) -> None:
        """Initialize moderation service.

        Args:
            user_repository: User repository
            moderation_record_repository: Moderation record repository
            audit_service: Audit sink
            settings: Moderation policy
        """
        self.user_repository = user_repository
        self.moderation_record_repository = moderation_record_repository
        self.audit_service = audit_service
        self.settings = settings

    # ------------------------------------------------------------------
    # Permission checks
    # ------------------------------------------------------------------

    @staticmethod
    def has_permission(user: User, permission: Permission) -> bool:
        """Whether the user's effective role grants a permission."""
        return permission in ROLE_PERMISSIONS[user.effective_role]

    def require_permission(self, user: User, permission: Permission) -> None:
        """Raise unless the user's effective role grants a permission.

        Raises:
            PermissionDeniedError: If the permission is missing
        """
        if not self.has_permission(user, permission):
            logfire.warn(
                "Permission denied",
                user_id=user.id,
                role=user.effective_role.value,
                permission=permission.value,
            )
            raise PermissionDeniedError(f"Missing permission: {permission.value}")

    async def can_delete_comment(self, actor: User, comment: Comment) -> bool:
        """Whether the actor may soft-delete a comment.

        Authors may delete their own comments. Moderators and admins may
        delete anyone's except a super admin's.
        """
        if actor.effective_role == Role.SUPER_ADMIN:
            return True
        if comment.author_id == actor.id:
            return self.has_permission(actor, Permission.DELETE_OWN_COMMENT)
        if not self.has_permission(actor, Permission.DELETE_ANY_COMMENT):
            return False

        author = await self.user_repository.find_by_id(comment.author_id)
        return not (author and author.role == Role.SUPER_ADMIN)

    def can_edit_comment(self, actor: User, comment: Comment) -> bool:
        """Whether the actor may edit a comment: own and not deleted."""
        return (
            comment.author_id == actor.id
            and not comment.is_deleted
            and self.has_permission(actor, Permission.EDIT_OWN_COMMENT)
        )

    def check_can_act_on(
        self, actor: User, target: User, permission: Permission
    ) -> None:
        """Check hierarchy rules for an action by one user on another.

        Raises:
            PermissionDeniedError: If the actor lacks the permission, targets
                themselves, or targets an equal or higher role without
                being super admin
        """
        self.require_permission(actor, permission)

        if actor.id == target.id:
            raise PermissionDeniedError("Cannot perform this action on yourself")

        if actor.effective_role == Role.SUPER_ADMIN:
            return

        if target.role.at_least(actor.effective_role):
            logfire.warn(
                "Moderation against equal or higher role rejected",
                actor_id=actor.id,
                actor_role=actor.effective_role.value,
                target_id=target.id,
                target_role=target.role.value,
            )
            raise PermissionDeniedError(
                "Cannot act on a user with an equal or higher role"
            )

    # ------------------------------------------------------------------
    # Write gate
    # ------------------------------------------------------------------

    async def get_user(self, user_id: UserId) -> User:
        """Load a user fresh from the store.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.user_repository.find_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def ensure_can_write(
        self, user_id: UserId, now: Optional[datetime] = None
    ) -> User:
        """Gate a write request on the actor's current moderation state.

        Clears bans, mutes and shadow bans whose expiry has passed, then
        rejects the request if a ban is still in force.

        Args:
            user_id: Acting user
            now: Current time (defaults to now)

        Returns:
            The acting user, freshly read

        Raises:
            NotFoundError: If the user does not exist
            BannedError: If the user is banned
        """
        with logfire.span("moderation_service.ensure_can_write", user_id=user_id):
            now = now or utcnow()
            user = await self.get_user(user_id)

            if (
                (user.is_banned and not user.is_ban_active(now))
                or (user.is_muted and not user.is_mute_active(now))
                or (user.shadow_banned and not user.is_shadow_ban_active(now))
            ):
                fresh, cleared = await self.user_repository.clear_expired_restrictions(
                    user_id, now
                )
                if not fresh:
                    raise NotFoundError("User", str(user_id))
                user = fresh
                if cleared:
                    logfire.info(
                        "Expired restrictions cleared",
                        user_id=user_id,
                        cleared=cleared,
                    )

            if user.is_ban_active(now):
                logfire.warn("Write rejected for banned user", user_id=user_id)
                raise BannedError(user.ban_expires, user.ban_reason)

            return user

    def ensure_can_comment(self, user: User, now: Optional[datetime] = None) -> None:
        """Reject comment creation by a muted user.

        Raises:
            MutedError: If the mute is still in force
        """
        now = now or utcnow()
        if user.is_mute_active(now):
            logfire.warn(
                "Comment rejected for muted user",
                user_id=user.id,
                mute_expires=user.mute_expires,
            )
            raise MutedError(user.mute_expires)

    # ------------------------------------------------------------------
    # Moderation actions
    # ------------------------------------------------------------------

    async def warn_user(
        self,
        actor: User,
        target_id: UserId,
        reason: str,
        description: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> WarningOutcome:
        """Warn a user, muting them automatically at the thresholds.

        The active warning count resets whenever a mute is applied; the
        lifetime total always grows by one.
        """
        with logfire.span(
            "moderation_service.warn_user", actor_id=actor.id, target_id=target_id
        ):
            now = now or utcnow()
            reason, description = self._validate_reason(reason, description)
            # Row lock serializes concurrent warnings
            target = await self._lock_user(target_id)
            self.check_can_act_on(actor, target, Permission.WARN_USER)

            count = target.warning_count + 1
            warning_count, mute_duration = escalate_warning(
                target.warning_count, self.settings
            )
            updates: dict[str, Any] = {
                "warning_count": warning_count,
                "total_warns": target.total_warns + 1,
                "updated_at": now,
            }

            muted_until = None
            if mute_duration:
                muted_until = now + mute_duration
                # An existing longer mute is never shortened
                if target.is_mute_active(now) and target.mute_expires:
                    muted_until = max(muted_until, target.mute_expires)
                updates.update(is_muted=True, mute_expires=muted_until)

            user = await self._update_user(target_id, updates)

            record = await self._append_record(
                ModerationAction.WARNING,
                actor,
                user,
                reason=reason,
                description=description,
                now=now,
            )
            if muted_until:
                await self._append_record(
                    ModerationAction.MUTE,
                    actor,
                    user,
                    reason=f"Automatic mute after {count} active warnings",
                    expires_at=muted_until,
                    now=now,
                )
                logfire.info(
                    "User muted by warning escalation",
                    user_id=user.id,
                    warnings=count,
                    mute_expires=muted_until,
                )

            await self.audit_service.record_moderation(
                actor.id,
                "WARN_USER",
                user.id,
                {
                    "reason": reason,
                    "description": description,
                    "warning_count": user.warning_count,
                    "total_warns": user.total_warns,
                    "muted_until": muted_until.isoformat() if muted_until else None,
                },
            )
            logfire.info(
                "User warned",
                actor_id=actor.id,
                target_id=user.id,
                warning_count=user.warning_count,
                total_warns=user.total_warns,
            )
            return WarningOutcome(user=user, record=record, muted_until=muted_until)

    async def ban_user(
        self,
        actor: User,
        target_id: UserId,
        reason: str,
        duration_hours: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> User:
        """Ban a user from all writes, permanently if no duration is given."""
        with logfire.span(
            "moderation_service.ban_user", actor_id=actor.id, target_id=target_id
        ):
            now = now or utcnow()
            reason, _ = self._validate_reason(reason)
            expires_at = self._expiry(now, duration_hours)
            target = await self._lock_user(target_id)
            self.check_can_act_on(actor, target, Permission.BAN_USER)

            user = await self._update_user(
                target_id,
                {
                    "is_banned": True,
                    "ban_reason": reason,
                    "ban_expires": expires_at,
                    "updated_at": now,
                },
            )
            await self._append_record(
                ModerationAction.BAN,
                actor,
                user,
                reason=reason,
                expires_at=expires_at,
                now=now,
            )
            await self.audit_service.record_moderation(
                actor.id,
                "BAN_USER",
                user.id,
                {
                    "reason": reason,
                    "duration_hours": duration_hours,
                    "is_permanent": expires_at is None,
                },
            )
            logfire.info(
                "User banned",
                actor_id=actor.id,
                target_id=user.id,
                expires_at=expires_at,
            )
            return user

    async def lift_ban(
        self,
        actor: User,
        target_id: UserId,
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> User:
        """Lift a user's ban before it expires."""
        with logfire.span(
            "moderation_service.lift_ban", actor_id=actor.id, target_id=target_id
        ):
            now = now or utcnow()
            target = await self._lock_user(target_id)
            self.check_can_act_on(actor, target, Permission.BAN_USER)
            if not target.is_banned:
                raise ValidationError("User is not banned")

            user = await self._update_user(
                target_id,
                {
                    "is_banned": False,
                    "ban_reason": None,
                    "ban_expires": None,
                    "updated_at": now,
                },
            )
            await self._append_record(
                ModerationAction.UNBAN, actor, user, reason=reason, now=now
            )
            await self.audit_service.record_moderation(
                actor.id, "UNBAN_USER", user.id, {"reason": reason}
            )
            logfire.info("User unbanned", actor_id=actor.id, target_id=user.id)
            return user

    async def shadow_ban_user(
        self,
        actor: User,
        target_id: UserId,
        reason: str,
        duration_hours: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> User:
        """Shadow-ban a user, suppressing any elevated privileges."""
        with logfire.span(
            "moderation_service.shadow_ban_user",
            actor_id=actor.id,
            target_id=target_id,
        ):
            now = now or utcnow()
            reason, _ = self._validate_reason(reason)
            expires_at = self._expiry(now, duration_hours)
            target = await self._lock_user(target_id)
            self.check_can_act_on(actor, target, Permission.SHADOW_BAN_USER)

            user = await self._update_user(
                target_id,
                {
                    "shadow_banned": True,
                    "shadow_ban_reason": reason,
                    "shadow_ban_expires": expires_at,
                    "updated_at": now,
                },
            )
            await self._append_record(
                ModerationAction.SHADOW_BAN,
                actor,
                user,
                reason=reason,
                expires_at=expires_at,
                now=now,
            )
            await self.audit_service.record_moderation(
                actor.id,
                "SHADOW_BAN",
                user.id,
                {"reason": reason, "duration_hours": duration_hours},
            )
            logfire.info(
                "User shadow banned",
                actor_id=actor.id,
                target_id=user.id,
                expires_at=expires_at,
            )
            return user

    async def lift_shadow_ban(
        self,
        actor: User,
        target_id: UserId,
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> User:
        """Remove a user's shadow ban."""
        with logfire.span(
            "moderation_service.lift_shadow_ban",
            actor_id=actor.id,
            target_id=target_id,
        ):
            now = now or utcnow()
            target = await self._lock_user(target_id)
            self.check_can_act_on(actor, target, Permission.SHADOW_BAN_USER)
            if not target.shadow_banned:
                raise ValidationError("User is not shadow banned")

            user = await self._update_user(
                target_id,
                {
                    "shadow_banned": False,
                    "shadow_ban_reason": None,
                    "shadow_ban_expires": None,
                    "updated_at": now,
                },
            )
            await self._append_record(
                ModerationAction.LIFT_SHADOW_BAN, actor, user, reason=reason, now=now
            )
            await self.audit_service.record_moderation(
                actor.id, "REMOVE_SHADOW_BAN", user.id, {"reason": reason}
            )
            logfire.info(
                "Shadow ban lifted", actor_id=actor.id, target_id=user.id
            )
            return user

    async def change_role(
        self,
        actor: User,
        target_id: UserId,
        new_role: Role,
        reason: str,
        now: Optional[datetime] = None,
    ) -> User:
        """Promote or demote a user.

        Admins may only move users between USER and MODERATOR. Nobody may
        grant SUPER_ADMIN, change a super admin, or change their own role.
        """
        with logfire.span(
            "moderation_service.change_role",
            actor_id=actor.id,
            target_id=target_id,
            new_role=new_role.value,
        ):
            now = now or utcnow()
            reason, _ = self._validate_reason(reason)
            self.require_permission(actor, Permission.CHANGE_ROLE)

            if actor.id == target_id:
                raise PermissionDeniedError("Cannot change your own role")
            if new_role == Role.SUPER_ADMIN:
                raise PermissionDeniedError("SUPER_ADMIN cannot be granted")

            target = await self._lock_user(target_id)
            if target.role == Role.SUPER_ADMIN:
                raise PermissionDeniedError("Cannot change the role of a super admin")

            if actor.effective_role != Role.SUPER_ADMIN and (
                new_role not in _ADMIN_MANAGED_ROLES
                or target.role not in _ADMIN_MANAGED_ROLES
            ):
                logfire.warn(
                    "Role change outside admin scope rejected",
                    actor_id=actor.id,
                    target_role=target.role.value,
                    new_role=new_role.value,
                )
                raise PermissionDeniedError(
                    "Admins may only grant or revoke the moderator role"
                )

            if target.role == new_role:
                raise ValidationError(f"User already has role {new_role.value}")

            old_role = target.role
            user = await self._update_user(
                target_id, {"role": new_role, "updated_at": now}
            )
            await self._append_record(
                ModerationAction.ROLE_CHANGE,
                actor,
                user,
                reason=reason,
                old_role=old_role,
                new_role=new_role,
                now=now,
            )
            await self.audit_service.record_moderation(
                actor.id,
                "ROLE_CHANGE",
                user.id,
                {
                    "old_role": old_role.value,
                    "new_role": new_role.value,
                    "reason": reason,
                },
            )
            logfire.info(
                "User role changed",
                actor_id=actor.id,
                target_id=user.id,
                old_role=old_role.value,
                new_role=new_role.value,
            )
            return user

    async def clear_warnings(
        self,
        actor: User,
        target_id: UserId,
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> User:
        """Reset a user's active warning count. The lifetime total is kept."""
        with logfire.span(
            "moderation_service.clear_warnings",
            actor_id=actor.id,
            target_id=target_id,
        ):
            now = now or utcnow()
            target = await self._lock_user(target_id)
            self.check_can_act_on(actor, target, Permission.BAN_USER)

            user = await self._update_user(
                target_id, {"warning_count": 0, "updated_at": now}
            )
            await self._append_record(
                ModerationAction.CLEAR_WARNINGS, actor, user, reason=reason, now=now
            )
            await self.audit_service.record_moderation(
                actor.id,
                "CLEAR_WARNINGS",
                user.id,
                {"previous_warning_count": target.warning_count, "reason": reason},
            )
            logfire.info(
                "Warnings cleared",
                actor_id=actor.id,
                target_id=user.id,
                previous_warning_count=target.warning_count,
            )
            return user

    async def list_users(
        self,
        actor: User,
        status: UserStatus = UserStatus.ALL,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> UserPage:
        """List users for moderation tooling, newest first.

        Args:
            actor: Viewing moderator
            status: Only users in this moderation status
            search: Case-insensitive username substring
            limit: Maximum number of users to return
            offset: Number of users to skip

        Raises:
            PermissionDeniedError: If the actor may not view reports
        """
        with logfire.span(
            "moderation_service.list_users", actor_id=actor.id, status=status.value
        ):
            self.require_permission(actor, Permission.VIEW_REPORTS)
            users = await self.user_repository.find_many(
                status=status, search=search, limit=limit, offset=offset
            )
            total = await self.user_repository.count(status=status, search=search)
            return UserPage(users=users, total=total)

    async def get_history(
        self, actor: User, target_id: UserId, limit: int = 50, offset: int = 0
    ) -> list[ModerationRecord]:
        """List moderation records about a user, newest first."""
        with logfire.span(
            "moderation_service.get_history", actor_id=actor.id, target_id=target_id
        ):
            self.require_permission(actor, Permission.VIEW_REPORTS)
            await self.get_user(target_id)
            return await self.moderation_record_repository.find_by_target(
                target_id, limit=limit, offset=offset
            )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validate_reason(
        self, reason: str, description: Optional[str] = None
    ) -> tuple[str, Optional[str]]:
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Reason is required")
        if len(reason) > self.settings.max_reason_length:
            raise ValidationError(
                f"Reason must be {self.settings.max_reason_length} characters or less"
            )
        if description is not None:
            description = description.strip() or None
            if (
                description
                and len(description) > self.settings.max_description_length
            ):
                raise ValidationError(
                    "Description must be "
                    f"{self.settings.max_description_length} characters or less"
                )
        return reason, description

    async def _lock_user(self, user_id: UserId) -> User:
        user = await self.user_repository.lock(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def _update_user(self, user_id: UserId, values: dict[str, Any]) -> User:
        user = await self.user_repository.update_state(user_id, values)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    @staticmethod
    def _expiry(now: datetime, duration_hours: Optional[int]) -> Optional[datetime]:
        if duration_hours is None:
            return None
        if duration_hours <= 0:
            raise ValidationError("Duration must be a positive number of hours")
        return now + timedelta(hours=duration_hours)

    async def _append_record(
        self,
        action: ModerationAction,
        actor: User,
        target: User,
        reason: Optional[str] = None,
        description: Optional[str] = None,
        expires_at: Optional[datetime] = None,
        old_role: Optional[Role] = None,
        new_role: Optional[Role] = None,
        now: Optional[datetime] = None,
    ) -> ModerationRecord:
        record = ModerationRecord(
            id=ModerationRecordId(uuid4()),
            action=action,
            actor_id=actor.id,
            target_id=target.id,
            reason=reason,
            description=description,
            expires_at=expires_at,
            old_role=old_role,
            new_role=new_role,
            created_at=now or utcnow(),
        )
        return await self.moderation_record_repository.add(record)
