"""Unit tests for the comment and vote use cases."""

from datetime import timedelta

import pytest

from remark.application.usecase.comment import (
    CreateCommentRequest,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentUseCase,
    EditCommentRequest,
    EditCommentUseCase,
    GetCommentsRequest,
    GetCommentsUseCase,
    GetThreadRequest,
    GetThreadUseCase,
)
from remark.application.usecase.vote import (
    CastVoteRequest,
    CastVoteUseCase,
    GetVotersRequest,
    GetVotersUseCase,
)
from remark.domain.error import (
    BannedError,
    InvalidCredentialError,
    MutedError,
    RateLimitedError,
)
from remark.domain.model import DELETED_MARKER
from remark.domain.repository import UserRepository
from remark.domain.value import Role, VoteState, VoteType
from remark.util.time import utcnow
from tests.conftest import add_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()


async def post(unit_env, credential, content, parent_id=None, media_id=21):
    use_case = await unit_env.get(CreateCommentUseCase)
    return await use_case.execute(
        CreateCommentRequest(
            credential=credential,
            media_id=media_id,
            content=content,
            parent_id=parent_id,
        )
    )


class TestCreateCommentUseCase:
    """Tests for CreateCommentUseCase."""

    @pytest.mark.asyncio
    async def test_first_comment_signs_user_in(self, unit_env):
        """Posting with a fresh credential creates the author."""
        # Act
        result = await post(unit_env, "user-1", "Hello")

        # Assert
        assert result.author_id == 1
        assert result.depth_level == 0
        user_repo = await unit_env.get(UserRepository)
        assert await user_repo.find_by_id(1) is not None

    @pytest.mark.asyncio
    async def test_reply_is_nested(self, unit_env):
        """Replies carry their parent and thread root."""
        top = await post(unit_env, "user-1", "top")
        reply = await post(unit_env, "user-2", "reply", parent_id=top.comment_id)

        assert reply.parent_comment_id == top.comment_id
        assert reply.root_comment_id == top.comment_id
        assert reply.depth_level == 1

    @pytest.mark.asyncio
    async def test_sixth_comment_is_rate_limited(self, unit_env):
        """Five comments per hour, then RateLimitedError."""
        for n in range(5):
            await post(unit_env, "user-1", f"comment {n}")

        with pytest.raises(RateLimitedError) as exc_info:
            await post(unit_env, "user-1", "one too many")
        assert exc_info.value.retry_after >= 1

    @pytest.mark.asyncio
    async def test_muted_user_cannot_comment(self, unit_env):
        """A muted author is turned away."""
        user_repo = await unit_env.get(UserRepository)
        await add_user(
            user_repo, 1, is_muted=True, mute_expires=utcnow() + timedelta(hours=1)
        )

        with pytest.raises(MutedError):
            await post(unit_env, "user-1", "let me speak")

    @pytest.mark.asyncio
    async def test_banned_user_cannot_comment(self, unit_env):
        """A banned author is turned away."""
        user_repo = await unit_env.get(UserRepository)
        await add_user(user_repo, 1, is_banned=True, ban_reason="spam")

        with pytest.raises(BannedError):
            await post(unit_env, "user-1", "let me speak")

    @pytest.mark.asyncio
    async def test_invalid_credential_is_rejected(self, unit_env):
        """Writes need a credential the identity provider accepts."""
        with pytest.raises(InvalidCredentialError):
            await post(unit_env, "not-a-token", "hello")


class TestReadingComments:
    """Tests for GetCommentsUseCase and GetThreadUseCase."""

    @pytest.mark.asyncio
    async def test_listing_carries_viewer_votes(self, unit_env):
        """Each node reports the viewer's vote; anonymous readers see NONE."""
        # Arrange
        top = await post(unit_env, "user-1", "top")
        reply = await post(unit_env, "user-1", "reply", parent_id=top.comment_id)
        cast_vote = await unit_env.get(CastVoteUseCase)
        await cast_vote.execute(
            CastVoteRequest(
                credential="user-2", comment_id=reply.comment_id, vote_type=VoteType.UP
            )
        )
        get_comments = await unit_env.get(GetCommentsUseCase)

        # Act
        as_voter = await get_comments.execute(
            GetCommentsRequest(media_id=21, credential="user-2")
        )
        anonymous = await get_comments.execute(GetCommentsRequest(media_id=21))
        bad_token = await get_comments.execute(
            GetCommentsRequest(media_id=21, credential="expired")
        )

        # Assert
        [node] = as_voter.comments
        assert node.user_vote == VoteState.NONE
        assert node.reply_count == 1
        assert node.replies[0].user_vote == VoteState.UP
        assert node.replies[0].upvotes == 1
        assert anonymous.comments[0].replies[0].user_vote == VoteState.NONE
        assert bad_token.comments[0].replies[0].user_vote == VoteState.NONE

    @pytest.mark.asyncio
    async def test_deleted_parent_keeps_replies(self, unit_env):
        """A deleted comment is masked but its replies stay beneath it."""
        # Arrange
        top = await post(unit_env, "user-1", "top")
        reply = await post(unit_env, "user-2", "reply", parent_id=top.comment_id)
        delete = await unit_env.get(DeleteCommentUseCase)

        # Act
        deleted = await delete.execute(
            DeleteCommentRequest(credential="user-1", comment_id=top.comment_id)
        )
        get_thread = await unit_env.get(GetThreadUseCase)
        result = await get_thread.execute(GetThreadRequest(comment_id=top.comment_id))

        # Assert
        assert deleted.is_deleted
        assert deleted.delete_reason == "Deleted by author"
        assert result.thread.content == DELETED_MARKER
        assert result.thread.replies[0].comment_id == reply.comment_id
        assert result.thread.replies[0].content == "reply"

    @pytest.mark.asyncio
    async def test_edit_is_visible_in_listing(self, unit_env):
        """Edited comments are flagged and count their edits."""
        top = await post(unit_env, "user-1", "v1")
        edit = await unit_env.get(EditCommentUseCase)

        result = await edit.execute(
            EditCommentRequest(
                credential="user-1", comment_id=top.comment_id, content="v2"
            )
        )

        assert result.content == "v2"
        assert result.is_edited
        assert result.edit_count == 1


class TestVoteUseCases:
    """Tests for CastVoteUseCase and GetVotersUseCase."""

    @pytest.mark.asyncio
    async def test_toggle_through_use_case(self, unit_env):
        """Voting UP twice leaves no vote."""
        top = await post(unit_env, "user-1", "top")
        cast_vote = await unit_env.get(CastVoteUseCase)
        request = CastVoteRequest(
            credential="user-2", comment_id=top.comment_id, vote_type=VoteType.UP
        )

        first = await cast_vote.execute(request)
        second = await cast_vote.execute(request)

        assert first.user_vote == VoteState.UP
        assert first.upvotes == 1
        assert second.user_vote == VoteState.NONE
        assert second.total_votes == 0

    @pytest.mark.asyncio
    async def test_muted_user_can_still_vote(self, unit_env):
        """Mutes only block comments."""
        top = await post(unit_env, "user-1", "top")
        user_repo = await unit_env.get(UserRepository)
        await add_user(
            user_repo, 2, is_muted=True, mute_expires=utcnow() + timedelta(hours=1)
        )
        cast_vote = await unit_env.get(CastVoteUseCase)

        result = await cast_vote.execute(
            CastVoteRequest(
                credential="user-2", comment_id=top.comment_id, vote_type=VoteType.DOWN
            )
        )

        assert result.user_vote == VoteState.DOWN

    @pytest.mark.asyncio
    async def test_voter_list_needs_moderator(self, unit_env):
        """Counts are public; the voter list is for moderators."""
        # Arrange
        top = await post(unit_env, "user-1", "top")
        cast_vote = await unit_env.get(CastVoteUseCase)
        await cast_vote.execute(
            CastVoteRequest(
                credential="user-2", comment_id=top.comment_id, vote_type=VoteType.UP
            )
        )
        await add_user(await unit_env.get(UserRepository), 3, role=Role.MODERATOR)
        get_voters = await unit_env.get(GetVotersUseCase)

        # Act
        public = await get_voters.execute(GetVotersRequest(comment_id=top.comment_id))
        moderator = await get_voters.execute(
            GetVotersRequest(comment_id=top.comment_id, credential="user-3")
        )

        # Assert
        assert public.upvotes == 1
        assert public.voters is None
        assert [v.user_id for v in moderator.voters] == [2]
        assert moderator.voters[0].vote == VoteState.UP
