"""Tests for the identity provider clients."""

import json

import httpx
import pytest

from remark.adapter.identity import MockIdentityClient, RealGraphQLIdentityClient
from remark.domain.error import InvalidCredentialError

GRAPHQL_URL = "https://identity.test/graphql"


def client_for(handler) -> RealGraphQLIdentityClient:
    return RealGraphQLIdentityClient(
        GRAPHQL_URL, timeout=5.0, transport=httpx.MockTransport(handler)
    )


class TestRealGraphQLIdentityClient:
    """Tests for RealGraphQLIdentityClient against a mock transport."""

    @pytest.mark.asyncio
    async def test_viewer_becomes_identity(self):
        """The Viewer query result maps onto a verified identity."""
        # Arrange
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["authorization"] = request.headers["Authorization"]
            seen["query"] = json.loads(request.content)["query"]
            return httpx.Response(
                200,
                json={
                    "data": {
                        "Viewer": {
                            "id": 777,
                            "name": "reader",
                            "avatar": {"large": None, "medium": "https://a/m.png"},
                            "moderatorStatus": "Anime Data Mod",
                        }
                    }
                },
            )

        # Act
        identity = await client_for(handler).verify("token-abc")

        # Assert
        assert seen["authorization"] == "Bearer token-abc"
        assert "Viewer" in seen["query"]
        assert identity.external_id == 777
        assert identity.display_name == "reader"
        assert identity.avatar_url == "https://a/m.png"
        assert identity.is_provider_moderator

    @pytest.mark.asyncio
    async def test_plain_viewer_is_not_moderator(self):
        """A null moderatorStatus means no provider moderator flag."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"data": {"Viewer": {"id": 1, "name": "x", "avatar": None}}},
            )

        identity = await client_for(handler).verify("token")

        assert not identity.is_provider_moderator
        assert identity.avatar_url is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(401, json={"errors": [{"message": "Invalid token"}]}),
            httpx.Response(200, json={"errors": [{"message": "Invalid token"}]}),
            httpx.Response(200, json={"data": {"Viewer": None}}),
        ],
    )
    async def test_rejections_become_invalid_credential(self, response):
        """Any failure to resolve the viewer rejects the credential."""

        def handler(request: httpx.Request) -> httpx.Response:
            return response

        with pytest.raises(InvalidCredentialError):
            await client_for(handler).verify("token")

    @pytest.mark.asyncio
    async def test_transport_error_becomes_invalid_credential(self):
        """Network failures reject the credential instead of crashing."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        with pytest.raises(InvalidCredentialError):
            await client_for(handler).verify("token")


class TestMockIdentityClient:
    """Tests for MockIdentityClient."""

    @pytest.mark.asyncio
    async def test_user_credential(self):
        """user-<id> resolves to that id."""
        identity = await MockIdentityClient().verify("user-12")

        assert identity.external_id == 12
        assert identity.display_name == "mockuser12"
        assert not identity.is_provider_moderator

    @pytest.mark.asyncio
    async def test_moderator_credential(self):
        """The mod- prefix sets the provider moderator flag."""
        identity = await MockIdentityClient().verify("mod-user-12")

        assert identity.is_provider_moderator

    @pytest.mark.asyncio
    @pytest.mark.parametrize("credential", ["", "user-", "admin-1", "mod-12"])
    async def test_other_credentials_are_rejected(self, credential):
        """Anything outside the scheme is invalid."""
        with pytest.raises(InvalidCredentialError):
            await MockIdentityClient().verify(credential)
