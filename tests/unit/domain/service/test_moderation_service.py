"""Unit tests for ModerationService."""

from datetime import timedelta

import pytest

from remark.config import ModerationSettings
from remark.domain.error import (
    BannedError,
    MutedError,
    PermissionDeniedError,
    ValidationError,
)
from remark.domain.repository import ModerationRecordRepository, UserRepository
from remark.domain.service import ModerationService
from remark.domain.service.moderation_service import escalate_warning
from remark.domain.value import (
    ModerationAction,
    Permission,
    Role,
    UserId,
    UserStatus,
)
from remark.util.time import utcnow
from tests.conftest import add_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()


class TestEscalateWarning:
    """Tests for the warning escalation rule."""

    @pytest.mark.parametrize(
        "before,after,mute_hours",
        [
            (0, 1, None),
            (1, 2, None),
            (2, 0, 24),
            (4, 0, 24),
            (5, 0, 24 * 7),
            (9, 0, 24 * 7),
        ],
    )
    def test_thresholds(self, before, after, mute_hours):
        """Reaching 3 mutes for a day, reaching 6 mutes for a week."""
        count, duration = escalate_warning(before, ModerationSettings())

        assert count == after
        if mute_hours is None:
            assert duration is None
        else:
            assert duration == timedelta(hours=mute_hours)


class TestWarnUser:
    """Tests for warn_user method."""

    @pytest.mark.asyncio
    async def test_third_warning_mutes_for_a_day(self, unit_env):
        """The third warning mutes, resets the count and keeps the total."""
        # Arrange
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        moderator = await add_user(user_repo, 1, role=Role.MODERATOR)
        target = await add_user(user_repo, 2)
        now = utcnow()

        # Act
        outcomes = [
            await moderation_service.warn_user(
                moderator, target.id, f"rule {n}", now=now
            )
            for n in range(3)
        ]

        # Assert
        assert [o.muted_until for o in outcomes[:2]] == [None, None]
        final = outcomes[2]
        assert final.muted_until == now + timedelta(hours=24)
        assert final.user.is_muted
        assert final.user.warning_count == 0
        assert final.user.total_warns == 3

    @pytest.mark.asyncio
    async def test_sixth_warning_mutes_again(self, unit_env):
        """After a reset, warnings four and five pass and six mutes."""
        # Arrange
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        moderator = await add_user(user_repo, 1, role=Role.MODERATOR)
        target = await add_user(user_repo, 2)

        # Act
        muted = []
        for n in range(6):
            outcome = await moderation_service.warn_user(
                moderator, target.id, f"rule {n}"
            )
            muted.append(outcome.muted_until is not None)

        # Assert
        assert muted == [False, False, True, False, False, True]
        stored = await user_repo.find_by_id(target.id)
        assert stored.total_warns == 6
        assert stored.warning_count == 0

    @pytest.mark.asyncio
    async def test_long_mute_at_six_active_warnings(self, unit_env):
        """Five active warnings plus one mutes for a week."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        moderator = await add_user(user_repo, 1, role=Role.MODERATOR)
        target = await add_user(user_repo, 2, warning_count=5, total_warns=5)
        now = utcnow()

        outcome = await moderation_service.warn_user(
            moderator, target.id, "again", now=now
        )

        assert outcome.muted_until == now + timedelta(days=7)

    @pytest.mark.asyncio
    async def test_warning_writes_records(self, unit_env):
        """A muting warning appends a WARNING and a MUTE record."""
        # Arrange
        moderation_service = await unit_env.get(ModerationService)
        records = await unit_env.get(ModerationRecordRepository)
        user_repo = await unit_env.get(UserRepository)
        moderator = await add_user(user_repo, 1, role=Role.MODERATOR)
        target = await add_user(user_repo, 2, warning_count=2)

        # Act
        await moderation_service.warn_user(moderator, target.id, "spam")

        # Assert
        history = await records.find_by_target(target.id)
        assert sorted(r.action for r in history) == sorted(
            [ModerationAction.WARNING, ModerationAction.MUTE]
        )

    @pytest.mark.asyncio
    async def test_moderator_cannot_warn_moderator(self, unit_env):
        """Equal roles cannot act on each other."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        moderator = await add_user(user_repo, 1, role=Role.MODERATOR)
        peer = await add_user(user_repo, 2, role=Role.MODERATOR)

        with pytest.raises(PermissionDeniedError):
            await moderation_service.warn_user(moderator, peer.id, "nope")

    @pytest.mark.asyncio
    async def test_users_cannot_warn(self, unit_env):
        """Warning needs WARN_USER."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        actor = await add_user(user_repo, 1)
        target = await add_user(user_repo, 2)

        with pytest.raises(PermissionDeniedError):
            await moderation_service.warn_user(actor, target.id, "nope")

    @pytest.mark.asyncio
    async def test_reason_is_required(self, unit_env):
        """A blank reason is rejected."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        moderator = await add_user(user_repo, 1, role=Role.MODERATOR)
        target = await add_user(user_repo, 2)

        with pytest.raises(ValidationError):
            await moderation_service.warn_user(moderator, target.id, "   ")


class TestWriteGate:
    """Tests for ensure_can_write and ensure_can_comment."""

    @pytest.mark.asyncio
    async def test_banned_user_cannot_write(self, unit_env):
        """An active ban blocks every write."""
        # Arrange
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        admin = await add_user(user_repo, 1, role=Role.ADMIN)
        target = await add_user(user_repo, 2)
        await moderation_service.ban_user(
            admin, target.id, "spam", duration_hours=1
        )

        # Act & Assert
        with pytest.raises(BannedError) as exc_info:
            await moderation_service.ensure_can_write(target.id)
        assert exc_info.value.until is not None
        assert exc_info.value.reason == "spam"

    @pytest.mark.asyncio
    async def test_expired_ban_is_cleared_on_write(self, unit_env):
        """A ban past its expiry is lifted the next time the user writes."""
        # Arrange
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        admin = await add_user(user_repo, 1, role=Role.ADMIN)
        target = await add_user(user_repo, 2)
        now = utcnow()
        await moderation_service.ban_user(
            admin, target.id, "spam", duration_hours=1, now=now
        )

        # Act
        user = await moderation_service.ensure_can_write(
            target.id, now=now + timedelta(hours=2)
        )

        # Assert
        assert not user.is_banned
        assert user.ban_expires is None
        stored = await user_repo.find_by_id(target.id)
        assert not stored.is_banned

    @pytest.mark.asyncio
    async def test_mute_blocks_comments_not_writes(self, unit_env):
        """A muted user passes the write gate but cannot comment."""
        # Arrange
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        until = utcnow() + timedelta(hours=3)
        await add_user(user_repo, 2, is_muted=True, mute_expires=until)

        # Act
        user = await moderation_service.ensure_can_write(2)

        # Assert
        with pytest.raises(MutedError) as exc_info:
            moderation_service.ensure_can_comment(user)
        assert exc_info.value.until == until

    @pytest.mark.asyncio
    async def test_expired_mute_is_cleared(self, unit_env):
        """An expired mute no longer blocks comments."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        await add_user(
            user_repo,
            2,
            is_muted=True,
            mute_expires=utcnow() - timedelta(minutes=1),
        )

        user = await moderation_service.ensure_can_write(2)

        assert not user.is_muted
        moderation_service.ensure_can_comment(user)

    @pytest.mark.asyncio
    async def test_lazy_clear_keeps_warning_issued_after_read(
        self, unit_env, monkeypatch
    ):
        """Clearing an expired mute writes only the mute columns."""
        # Arrange
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        now = utcnow()
        moderator = await add_user(user_repo, 1, role=Role.MODERATOR)
        await add_user(
            user_repo,
            2,
            is_muted=True,
            mute_expires=now - timedelta(hours=1),
            warning_count=1,
            total_warns=1,
        )
        read = user_repo.find_by_id

        async def read_then_warn(user_id):
            user = await read(user_id)
            monkeypatch.setattr(user_repo, "find_by_id", read)
            await moderation_service.warn_user(moderator, UserId(2), "rude", now=now)
            return user

        monkeypatch.setattr(user_repo, "find_by_id", read_then_warn)

        # Act
        user = await moderation_service.ensure_can_write(UserId(2), now=now)

        # Assert
        assert not user.is_muted
        assert user.warning_count == 2
        assert user.total_warns == 2

    @pytest.mark.asyncio
    async def test_lazy_clear_keeps_ban_reapplied_after_read(
        self, unit_env, monkeypatch
    ):
        """A permanent ban issued after the read is not cleared as expired."""
        # Arrange
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        now = utcnow()
        admin = await add_user(user_repo, 1, role=Role.ADMIN)
        await add_user(
            user_repo,
            2,
            is_banned=True,
            ban_reason="spam",
            ban_expires=now - timedelta(hours=1),
        )
        read = user_repo.find_by_id

        async def read_then_ban(user_id):
            user = await read(user_id)
            monkeypatch.setattr(user_repo, "find_by_id", read)
            await moderation_service.ban_user(admin, UserId(2), "spam again", now=now)
            return user

        monkeypatch.setattr(user_repo, "find_by_id", read_then_ban)

        # Act & Assert
        with pytest.raises(BannedError):
            await moderation_service.ensure_can_write(UserId(2), now=now)
        stored = await user_repo.find_by_id(UserId(2))
        assert stored.is_banned
        assert stored.ban_expires is None


class TestBans:
    """Tests for bans and shadow bans."""

    @pytest.mark.asyncio
    async def test_ban_without_duration_is_permanent(self, unit_env):
        """No duration means no expiry."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        admin = await add_user(user_repo, 1, role=Role.ADMIN)
        target = await add_user(user_repo, 2)

        user = await moderation_service.ban_user(admin, target.id, "spam")

        assert user.is_banned
        assert user.ban_expires is None

    @pytest.mark.asyncio
    async def test_non_positive_duration_is_rejected(self, unit_env):
        """Durations must be positive."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        admin = await add_user(user_repo, 1, role=Role.ADMIN)
        target = await add_user(user_repo, 2)

        with pytest.raises(ValidationError):
            await moderation_service.ban_user(
                admin, target.id, "spam", duration_hours=0
            )

    @pytest.mark.asyncio
    async def test_moderators_cannot_ban(self, unit_env):
        """Banning needs ADMIN."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        moderator = await add_user(user_repo, 1, role=Role.MODERATOR)
        target = await add_user(user_repo, 2)

        with pytest.raises(PermissionDeniedError):
            await moderation_service.ban_user(moderator, target.id, "spam")

    @pytest.mark.asyncio
    async def test_lift_ban_requires_a_ban(self, unit_env):
        """Lifting a ban that does not exist is a validation error."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        admin = await add_user(user_repo, 1, role=Role.ADMIN)
        target = await add_user(user_repo, 2)

        with pytest.raises(ValidationError):
            await moderation_service.lift_ban(admin, target.id)

    @pytest.mark.asyncio
    async def test_super_admin_can_ban_admin(self, unit_env):
        """The super admin is exempt from the hierarchy rule."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        owner = await add_user(user_repo, 1, role=Role.SUPER_ADMIN)
        admin = await add_user(user_repo, 2, role=Role.ADMIN)

        user = await moderation_service.ban_user(owner, admin.id, "abuse")

        assert user.is_banned

    @pytest.mark.asyncio
    async def test_shadow_ban_suppresses_elevated_permissions(self, unit_env):
        """A shadow-banned moderator acts as a plain user."""
        # Arrange
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        owner = await add_user(user_repo, 1, role=Role.SUPER_ADMIN)
        moderator = await add_user(user_repo, 2, role=Role.MODERATOR)
        target = await add_user(user_repo, 3)

        # Act
        shadowed = await moderation_service.shadow_ban_user(
            owner, moderator.id, "abuse"
        )

        # Assert
        assert shadowed.effective_role == Role.USER
        assert not moderation_service.has_permission(shadowed, Permission.WARN_USER)
        with pytest.raises(PermissionDeniedError):
            await moderation_service.warn_user(shadowed, target.id, "nope")

        restored = await moderation_service.lift_shadow_ban(owner, moderator.id)
        assert moderation_service.has_permission(restored, Permission.WARN_USER)

    @pytest.mark.asyncio
    async def test_expired_shadow_ban_no_longer_suppresses(self, unit_env):
        """Elevation returns once the shadow ban expires, before any write."""
        user_repo = await unit_env.get(UserRepository)
        moderator = await add_user(
            user_repo,
            2,
            role=Role.MODERATOR,
            shadow_banned=True,
            shadow_ban_expires=utcnow() - timedelta(minutes=1),
        )

        assert moderator.effective_role == Role.MODERATOR
        assert ModerationService.has_permission(moderator, Permission.VIEW_VOTES)


class TestChangeRole:
    """Tests for change_role method."""

    @pytest.mark.asyncio
    async def test_admin_promotes_user_to_moderator(self, unit_env):
        """Admins manage the moderator role."""
        # Arrange
        moderation_service = await unit_env.get(ModerationService)
        records = await unit_env.get(ModerationRecordRepository)
        user_repo = await unit_env.get(UserRepository)
        admin = await add_user(user_repo, 1, role=Role.ADMIN)
        target = await add_user(user_repo, 2)

        # Act
        user = await moderation_service.change_role(
            admin, target.id, Role.MODERATOR, "helpful"
        )

        # Assert
        assert user.role == Role.MODERATOR
        [record] = await records.find_by_target(target.id)
        assert record.action == ModerationAction.ROLE_CHANGE
        assert record.old_role == Role.USER
        assert record.new_role == Role.MODERATOR

    @pytest.mark.asyncio
    async def test_admin_cannot_grant_admin(self, unit_env):
        """Only the super admin creates admins."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        admin = await add_user(user_repo, 1, role=Role.ADMIN)
        target = await add_user(user_repo, 2)

        with pytest.raises(PermissionDeniedError):
            await moderation_service.change_role(
                admin, target.id, Role.ADMIN, "promotion"
            )

    @pytest.mark.asyncio
    async def test_super_admin_grants_admin(self, unit_env):
        """The super admin may grant ADMIN."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        owner = await add_user(user_repo, 1, role=Role.SUPER_ADMIN)
        target = await add_user(user_repo, 2, role=Role.MODERATOR)

        user = await moderation_service.change_role(
            owner, target.id, Role.ADMIN, "promotion"
        )

        assert user.role == Role.ADMIN

    @pytest.mark.asyncio
    async def test_super_admin_cannot_be_granted(self, unit_env):
        """SUPER_ADMIN comes from configuration only."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        owner = await add_user(user_repo, 1, role=Role.SUPER_ADMIN)
        target = await add_user(user_repo, 2, role=Role.ADMIN)

        with pytest.raises(PermissionDeniedError):
            await moderation_service.change_role(
                owner, target.id, Role.SUPER_ADMIN, "no"
            )

    @pytest.mark.asyncio
    async def test_own_role_cannot_change(self, unit_env):
        """Nobody changes their own role."""
        moderation_service = await unit_env.get(ModerationService)
        admin = await add_user(await unit_env.get(UserRepository), 1, role=Role.ADMIN)

        with pytest.raises(PermissionDeniedError):
            await moderation_service.change_role(admin, admin.id, Role.USER, "quit")

    @pytest.mark.asyncio
    async def test_same_role_is_rejected(self, unit_env):
        """A no-op role change is a validation error."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        admin = await add_user(user_repo, 1, role=Role.ADMIN)
        target = await add_user(user_repo, 2)

        with pytest.raises(ValidationError):
            await moderation_service.change_role(admin, target.id, Role.USER, "same")


class TestClearWarnings:
    """Tests for clear_warnings and get_history."""

    @pytest.mark.asyncio
    async def test_clear_keeps_lifetime_total(self, unit_env):
        """Clearing resets the active count only."""
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        admin = await add_user(user_repo, 1, role=Role.ADMIN)
        target = await add_user(user_repo, 2, warning_count=2, total_warns=7)

        user = await moderation_service.clear_warnings(admin, target.id, "fresh")

        assert user.warning_count == 0
        assert user.total_warns == 7

    @pytest.mark.asyncio
    async def test_history_is_newest_first(self, unit_env):
        """History lists the target's records, newest first."""
        # Arrange
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        admin = await add_user(user_repo, 1, role=Role.ADMIN)
        target = await add_user(user_repo, 2)
        now = utcnow()
        await moderation_service.warn_user(admin, target.id, "first", now=now)
        await moderation_service.ban_user(
            admin, target.id, "second", now=now + timedelta(minutes=1)
        )

        # Act
        history = await moderation_service.get_history(admin, target.id)

        # Assert
        assert [r.action for r in history] == [
            ModerationAction.BAN,
            ModerationAction.WARNING,
        ]


class TestListUsers:
    """Tests for list_users."""

    @pytest.mark.asyncio
    async def test_status_filter(self, unit_env):
        """Each status keeps only the matching users."""
        # Arrange
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        moderator = await add_user(user_repo, 1, role=Role.MODERATOR)
        banned = await add_user(user_repo, 2, is_banned=True, ban_reason="spam")
        hidden = await add_user(user_repo, 3, shadow_banned=True)

        # Act
        everyone = await moderation_service.list_users(moderator)
        only_banned = await moderation_service.list_users(
            moderator, status=UserStatus.BANNED
        )
        only_hidden = await moderation_service.list_users(
            moderator, status=UserStatus.SHADOW_BANNED
        )
        only_active = await moderation_service.list_users(
            moderator, status=UserStatus.ACTIVE
        )

        # Assert
        assert everyone.total == 3
        assert [u.id for u in only_banned.users] == [banned.id]
        assert [u.id for u in only_hidden.users] == [hidden.id]
        assert [u.id for u in only_active.users] == [moderator.id]

    @pytest.mark.asyncio
    async def test_username_search_and_paging(self, unit_env):
        """Search is a case-insensitive substring; total ignores paging."""
        # Arrange
        moderation_service = await unit_env.get(ModerationService)
        user_repo = await unit_env.get(UserRepository)
        moderator = await add_user(user_repo, 1, role=Role.MODERATOR)
        for user_id in (21, 22, 23):
            await add_user(user_repo, user_id)

        # Act
        page = await moderation_service.list_users(
            moderator, search="USER2", limit=2, offset=0
        )

        # Assert
        assert page.total == 3
        assert len(page.users) == 2
        assert all(u.username.startswith("user2") for u in page.users)

    @pytest.mark.asyncio
    async def test_users_cannot_list(self, unit_env):
        """Plain users are refused."""
        moderation_service = await unit_env.get(ModerationService)
        user = await add_user(await unit_env.get(UserRepository), 1)

        with pytest.raises(PermissionDeniedError):
            await moderation_service.list_users(user)
