"""API tests for the HTTP surface, backed by in-memory components."""

from uuid import uuid4

from tests.conftest import auth
from tests.harness import create_client_fixture

client = create_client_fixture()


def post_comment(client, user_id, content="Hello", **fields):
    return client.post(
        "/comments",
        json={"media_id": 21, "content": content, **fields},
        headers=auth(user_id),
    )


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, client):
        """Health check reports the service as up."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAuthRoutes:
    """Tests for /auth."""

    def test_verify_returns_user(self, client):
        """A valid bearer token signs the user in."""
        response = client.post("/auth/verify", headers=auth(5, moderator=True))

        assert response.status_code == 200
        body = response.json()
        assert body["user_id"] == 5
        assert body["role"] == "MODERATOR"

    def test_me_requires_credential(self, client):
        """Missing credentials are a 401 with a bearer challenge."""
        response = client.get("/auth/me")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error"] == "AuthenticationRequiredError"

    def test_invalid_credential_is_401(self, client):
        """Rejected credentials are a 401."""
        response = client.get(
            "/auth/me", headers={"Authorization": "Bearer not-valid"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "InvalidCredentialError"


class TestCommentRoutes:
    """Tests for /comments."""

    def test_create_and_list(self, client):
        """Created comments appear in the media listing."""
        # Arrange
        created = post_comment(client, 1, "First!")
        top_id = created.json()["comment_id"]
        post_comment(client, 2, "Reply", parent_id=top_id)

        # Act
        response = client.get("/comments", params={"media_id": 21})

        # Assert
        assert created.status_code == 201
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        [node] = body["comments"]
        assert node["content"] == "First!"
        assert node["reply_count"] == 1
        assert node["replies"][0]["content"] == "Reply"

    def test_create_without_credential_is_401(self, client):
        """Posting needs a bearer token."""
        response = client.post("/comments", json={"media_id": 21, "content": "hi"})

        assert response.status_code == 401

    def test_sixth_comment_is_429(self, client):
        """Rate-limited writes carry Retry-After."""
        for n in range(5):
            assert post_comment(client, 1, f"comment {n}").status_code == 201

        response = post_comment(client, 1, "one too many")

        assert response.status_code == 429
        retry_after = int(response.headers["Retry-After"])
        assert retry_after >= 1
        assert response.json()["retry_after"] == retry_after

    def test_unknown_parent_is_404(self, client):
        """Replying to a missing comment is a 404."""
        response = post_comment(client, 1, "reply", parent_id=str(uuid4()))

        assert response.status_code == 404

    def test_thread_of_unknown_comment_is_404(self, client):
        """Fetching a missing thread is a 404."""
        response = client.get(f"/comments/{uuid4()}/thread")

        assert response.status_code == 404

    def test_blank_content_is_400(self, client):
        """Blank comments are a validation error."""
        response = post_comment(client, 1, "   ")

        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    def test_delete_then_vote_is_400(self, client):
        """Voting on a deleted comment is rejected."""
        top_id = post_comment(client, 1).json()["comment_id"]
        deleted = client.delete(f"/comments/{top_id}", headers=auth(1))

        response = client.post(
            f"/comments/{top_id}/votes", json={"vote_type": 1}, headers=auth(2)
        )

        assert deleted.status_code == 200
        assert response.status_code == 400
        assert response.json()["error"] == "CommentDeletedError"

    def test_edit_by_other_user_is_403(self, client):
        """Only the author edits."""
        top_id = post_comment(client, 1).json()["comment_id"]

        response = client.patch(
            f"/comments/{top_id}", json={"content": "mine now"}, headers=auth(2)
        )

        assert response.status_code == 403


class TestVoteRoutes:
    """Tests for votes."""

    def test_vote_toggle(self, client):
        """Voting the same way twice clears the vote."""
        top_id = post_comment(client, 1).json()["comment_id"]

        first = client.post(
            f"/comments/{top_id}/votes", json={"vote_type": 1}, headers=auth(2)
        )
        second = client.post(
            f"/comments/{top_id}/votes", json={"vote_type": 1}, headers=auth(2)
        )

        assert first.json()["user_vote"] == "up"
        assert first.json()["upvotes"] == 1
        assert second.json()["user_vote"] == "none"
        assert second.json()["upvotes"] == 0

    def test_invalid_vote_type_is_422(self, client):
        """Only 1 and -1 are votes."""
        top_id = post_comment(client, 1).json()["comment_id"]

        response = client.post(
            f"/comments/{top_id}/votes", json={"vote_type": 0}, headers=auth(2)
        )

        assert response.status_code == 422

    def test_vote_stats_for_moderators(self, client):
        """Moderators see site-wide totals; users get 403."""
        top_id = post_comment(client, 1).json()["comment_id"]
        client.post(f"/comments/{top_id}/votes", json={"vote_type": 1}, headers=auth(2))

        as_user = client.get("/votes/stats", headers=auth(2))
        as_moderator = client.get("/votes/stats", headers=auth(3, moderator=True))

        assert as_user.status_code == 403
        assert as_moderator.status_code == 200
        body = as_moderator.json()
        assert body["total_votes"] == 1
        assert body["live_comments"] == 1
        assert body["top_voters"][0]["user_id"] == 2


class TestModerationRoutes:
    """Tests for /moderation."""

    def test_user_cannot_warn(self, client):
        """Warning needs a moderator."""
        post_comment(client, 2)

        response = client.post(
            "/moderation/users/2/warnings", json={"reason": "rude"}, headers=auth(1)
        )

        assert response.status_code == 403
        assert response.json()["error"] == "PermissionDeniedError"

    def test_muted_user_gets_403_with_until(self, client):
        """After three warnings the target is muted."""
        post_comment(client, 2)
        for _ in range(3):
            response = client.post(
                "/moderation/users/2/warnings",
                json={"reason": "rude"},
                headers=auth(1, moderator=True),
            )
            assert response.status_code == 200

        blocked = post_comment(client, 2, "still here")

        assert blocked.status_code == 403
        assert blocked.json()["error"] == "MutedError"
        assert "until" in blocked.json()

    def test_unknown_user_is_404(self, client):
        """Moderating a user who never signed in is a 404."""
        response = client.post(
            "/moderation/users/404/warnings",
            json={"reason": "who"},
            headers=auth(1, moderator=True),
        )

        assert response.status_code == 404

    def test_user_list_filters(self, client):
        """Moderators search users by name and moderation status."""
        post_comment(client, 2)
        post_comment(client, 4)
        headers = auth(3, moderator=True)

        found = client.get(
            "/moderation/users", params={"search": "mockuser4"}, headers=headers
        )
        banned = client.get(
            "/moderation/users", params={"status": "BANNED"}, headers=headers
        )

        assert found.status_code == 200
        body = found.json()
        assert body["total"] == 1
        assert body["users"][0]["moderation"]["user_id"] == 4
        assert body["users"][0]["comment_count"] == 1
        assert body["has_more"] is False
        assert banned.json()["total"] == 0


class TestReportAndStatusRoutes:
    """Tests for reports and rate limit status."""

    def test_duplicate_report_is_409(self, client):
        """A second report by the same user conflicts."""
        top_id = post_comment(client, 1).json()["comment_id"]
        url = f"/comments/{top_id}/reports"

        first = client.post(url, json={"reason": "spam"}, headers=auth(2))
        second = client.post(url, json={"reason": "spam"}, headers=auth(2))

        assert first.status_code == 201
        assert second.status_code == 409

    def test_report_queue_for_moderators(self, client):
        """Moderators see pending reports; users get 403."""
        top_id = post_comment(client, 1).json()["comment_id"]
        client.post(
            f"/comments/{top_id}/reports", json={"reason": "spam"}, headers=auth(2)
        )

        as_user = client.get("/reports", headers=auth(2))
        as_moderator = client.get("/reports", headers=auth(3, moderator=True))

        assert as_user.status_code == 403
        assert as_moderator.status_code == 200
        assert as_moderator.json()["total"] == 1

    def test_rate_limit_status(self, client):
        """Status lists every action budget."""
        post_comment(client, 1)

        response = client.get("/rate-limits", headers=auth(1))

        assert response.status_code == 200
        limits = {item["action"]: item for item in response.json()["limits"]}
        assert limits["comment"]["used"] == 1
        assert limits["comment"]["remaining"] == 4
