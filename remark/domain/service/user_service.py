"""User domain service."""

from datetime import datetime
from typing import Optional

import logfire

from remark.config import ModerationSettings
from remark.domain.error import NotFoundError
from remark.domain.model import User
from remark.domain.repository import UserRepository
from remark.domain.value import DisplayName, Role, UserId, VerifiedIdentity
from remark.util.time import utcnow

from .base import Service


class UserService(Service):
    """Domain service for user operations."""

    def __init__(
        self, user_repository: UserRepository, settings: ModerationSettings
    ) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
            settings: Moderation settings (super admin identity)
        """
        self.user_repository = user_repository
        self.settings = settings

    def resolve_role(
        self, identity: VerifiedIdentity, existing: Optional[User]
    ) -> Role:
        """Decide the role for an identity signing in.

        Precedence: configured super admin, then a stored MODERATOR/ADMIN
        role, then the provider's moderator flag, then USER. A stored
        SUPER_ADMIN that no longer matches the configured identity is
        kept as ADMIN.
        """
        if identity.external_id == self.settings.super_admin_id:
            return Role.SUPER_ADMIN
        if existing:
            if existing.role == Role.SUPER_ADMIN:
                return Role.ADMIN
            if existing.role in (Role.MODERATOR, Role.ADMIN):
                return existing.role
        if identity.is_provider_moderator:
            return Role.MODERATOR
        return Role.USER

    async def upsert_from_identity(
        self, identity: VerifiedIdentity, now: Optional[datetime] = None
    ) -> User:
        """Create or refresh the user behind a verified identity.

        Args:
            identity: Identity returned by the identity provider
            now: Current time (defaults to now)

        Returns:
            The stored user
        """
        with logfire.span(
            "user_service.upsert_from_identity", external_id=identity.external_id
        ):
            now = now or utcnow()
            user_id = UserId(identity.external_id)
            existing = await self.user_repository.find_by_id(user_id)
            role = self.resolve_role(identity, existing)
            username = DisplayName(identity.display_name[:50] or str(user_id))

            if existing:
                if existing.role != role:
                    logfire.info(
                        "Role resolved on sign-in",
                        user_id=user_id,
                        old_role=existing.role.value,
                        new_role=role.value,
                    )
                user = existing.model_copy(
                    update={
                        "username": username,
                        "avatar_url": identity.avatar_url,
                        "role": role,
                        "updated_at": now,
                        "last_active": now,
                    }
                )
            else:
                user = User(
                    id=user_id,
                    username=username,
                    avatar_url=identity.avatar_url,
                    role=role,
                    created_at=now,
                    updated_at=now,
                    last_active=now,
                )
                logfire.info("User created", user_id=user_id, role=role.value)

            return await self.user_repository.upsert_identity(user)

    async def get_user(self, user_id: UserId) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.user_repository.find_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user
