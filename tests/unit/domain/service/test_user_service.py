"""Unit tests for UserService and AuthService."""

import pytest

from remark.domain.error import InvalidCredentialError
from remark.domain.repository import UserRepository
from remark.domain.service import AuthService, ModerationService, UserService
from remark.domain.value import Role, UserId, VerifiedIdentity
from tests.conftest import add_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()

SUPER_ADMIN_ID = 5724017


def identity(external_id: int, moderator: bool = False) -> VerifiedIdentity:
    return VerifiedIdentity(
        external_id=external_id,
        display_name=f"viewer{external_id}",
        is_provider_moderator=moderator,
    )


class TestResolveRole:
    """Tests for role resolution on sign-in."""

    @pytest.mark.asyncio
    async def test_new_user_is_user(self, unit_env):
        """Plain identities start as USER."""
        user_service = await unit_env.get(UserService)

        assert user_service.resolve_role(identity(1), None) == Role.USER

    @pytest.mark.asyncio
    async def test_provider_moderator_becomes_moderator(self, unit_env):
        """The provider's moderator flag grants MODERATOR."""
        user_service = await unit_env.get(UserService)

        role = user_service.resolve_role(identity(1, moderator=True), None)

        assert role == Role.MODERATOR

    @pytest.mark.asyncio
    async def test_configured_super_admin(self, unit_env):
        """The configured identity is always SUPER_ADMIN."""
        user_service = await unit_env.get(UserService)

        assert user_service.resolve_role(identity(SUPER_ADMIN_ID), None) == (
            Role.SUPER_ADMIN
        )

    @pytest.mark.asyncio
    async def test_stored_admin_role_is_kept(self, unit_env):
        """Roles granted in the service survive sign-in."""
        user_service = await unit_env.get(UserService)
        existing = await add_user(
            await unit_env.get(UserRepository), 1, role=Role.ADMIN
        )

        assert user_service.resolve_role(identity(1), existing) == Role.ADMIN

    @pytest.mark.asyncio
    async def test_stale_super_admin_is_demoted(self, unit_env):
        """A stored SUPER_ADMIN that is no longer configured keeps ADMIN."""
        user_service = await unit_env.get(UserService)
        existing = await add_user(
            await unit_env.get(UserRepository), 1, role=Role.SUPER_ADMIN
        )

        assert user_service.resolve_role(identity(1), existing) == Role.ADMIN


class TestAuthenticate:
    """Tests for AuthService.authenticate."""

    @pytest.mark.asyncio
    async def test_first_sign_in_creates_user(self, unit_env):
        """A valid credential creates the user behind it."""
        # Arrange
        auth_service = await unit_env.get(AuthService)
        user_repo = await unit_env.get(UserRepository)

        # Act
        user = await auth_service.authenticate("mod-user-42")

        # Assert
        assert user.id == 42
        assert str(user.username) == "mockuser42"
        assert user.role == Role.MODERATOR
        assert await user_repo.find_by_id(42) is not None

    @pytest.mark.asyncio
    async def test_sign_in_keeps_moderation_state(self, unit_env):
        """Signing in again refreshes the profile and keeps warnings."""
        auth_service = await unit_env.get(AuthService)
        await add_user(await unit_env.get(UserRepository), 7, warning_count=2)

        user = await auth_service.authenticate("user-7")

        assert user.warning_count == 2
        assert str(user.username) == "mockuser7"

    @pytest.mark.asyncio
    async def test_sign_in_keeps_ban_applied_after_its_read(
        self, unit_env, monkeypatch
    ):
        """A ban committed between the sign-in read and write survives."""
        # Arrange
        user_repo = await unit_env.get(UserRepository)
        user_service = await unit_env.get(UserService)
        moderation_service = await unit_env.get(ModerationService)
        admin = await add_user(user_repo, 100, role=Role.ADMIN)
        await add_user(user_repo, 7)
        read = user_repo.find_by_id

        async def read_then_ban(user_id):
            user = await read(user_id)
            monkeypatch.setattr(user_repo, "find_by_id", read)
            await moderation_service.ban_user(admin, UserId(7), "spam")
            return user

        monkeypatch.setattr(user_repo, "find_by_id", read_then_ban)

        # Act
        await user_service.upsert_from_identity(identity(7))

        # Assert
        stored = await user_repo.find_by_id(UserId(7))
        assert stored.is_banned
        assert stored.ban_reason == "spam"
        assert str(stored.username) == "viewer7"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("credential", ["", "   ", "garbage", "user-abc"])
    async def test_bad_credentials_are_rejected(self, unit_env, credential):
        """Missing or unknown credentials raise InvalidCredentialError."""
        auth_service = await unit_env.get(AuthService)

        with pytest.raises(InvalidCredentialError):
            await auth_service.authenticate(credential)
