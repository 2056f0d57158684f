"""Identity provider client.

Resolves a caller's bearer token to the provider account behind it by
asking the provider's GraphQL API for the current viewer.
"""

import httpx
import logfire

from remark.adapter.error import IdentityProviderError
from remark.domain.error import InvalidCredentialError
from remark.domain.service.auth_service import IdentityVerifier
from remark.domain.value import VerifiedIdentity

VIEWER_QUERY = """
query {
  Viewer {
    id
    name
    avatar {
      large
      medium
    }
    moderatorStatus
  }
}
"""


class IdentityClient(IdentityVerifier):
    """Base class for identity provider clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealGraphQLIdentityClient(IdentityClient):
    """Identity client backed by the provider's GraphQL Viewer query."""

    def __init__(
        self,
        graphql_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize identity client.

        Args:
            graphql_url: Provider GraphQL endpoint
            timeout: Request timeout in seconds
            transport: Custom httpx transport (defaults to the network)
        """
        self.graphql_url = graphql_url
        self.timeout = timeout
        self.transport = transport

    async def verify(self, credential: str) -> VerifiedIdentity:
        """Resolve a bearer token to the provider account.

        Args:
            credential: Provider access token

        Returns:
            Verified identity of the token's owner

        Raises:
            InvalidCredentialError: If the provider rejects the token or
                cannot be reached
        """
        try:
            viewer = await self._fetch_viewer(credential)
        except IdentityProviderError as e:
            raise InvalidCredentialError("Invalid or expired token") from e

        avatar = viewer.get("avatar") or {}
        identity = VerifiedIdentity(
            external_id=int(viewer["id"]),
            display_name=viewer.get("name") or str(viewer["id"]),
            avatar_url=avatar.get("large") or avatar.get("medium"),
            is_provider_moderator=bool(viewer.get("moderatorStatus")),
        )

        logfire.info(
            "Identity verified",
            external_id=identity.external_id,
            is_provider_moderator=identity.is_provider_moderator,
        )
        return identity

    async def _fetch_viewer(self, access_token: str) -> dict:
        """Run the Viewer query with the caller's token.

        Args:
            access_token: Provider access token

        Returns:
            Viewer object from the GraphQL response

        Raises:
            IdentityProviderError: If the request or query fails
        """
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(
                    self.graphql_url,
                    json={"query": VIEWER_QUERY},
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Accept": "application/json",
                    },
                    timeout=self.timeout,
                )

                if response.status_code != 200:
                    logfire.error(
                        "Identity provider request failed",
                        status_code=response.status_code,
                        error=response.text,
                    )
                    raise IdentityProviderError(
                        f"Viewer query failed: {response.status_code}"
                    )

                result = response.json()

        except httpx.HTTPError as e:
            logfire.error("Identity provider HTTP error", error=str(e))
            raise IdentityProviderError(f"HTTP error during viewer query: {e}")

        if result.get("errors"):
            message = result["errors"][0].get("message", "unknown error")
            logfire.warn("Identity provider GraphQL error", error=message)
            raise IdentityProviderError(f"GraphQL error: {message}")

        viewer = (result.get("data") or {}).get("Viewer")
        if not viewer or not viewer.get("id"):
            raise IdentityProviderError("Viewer missing from response")
        return viewer


class MockIdentityClient(IdentityClient):
    """Mock identity client for testing.

    Returns deterministic identities without making real API calls.
    Credentials of the form ``user-<id>`` resolve to that id; prefix with
    ``mod-`` to get the provider moderator flag. Anything else is rejected.
    """

    async def verify(self, credential: str) -> VerifiedIdentity:
        """Return a mock identity for the credential.

        Args:
            credential: Mock credential

        Returns:
            Mock identity

        Raises:
            InvalidCredentialError: If the credential does not match the scheme
        """
        is_moderator = credential.startswith("mod-")
        token = credential.removeprefix("mod-")
        prefix, _, raw_id = token.partition("-")
        if prefix != "user" or not raw_id.isdigit():
            raise InvalidCredentialError("Invalid or expired token")

        return VerifiedIdentity(
            external_id=int(raw_id),
            display_name=f"mockuser{raw_id}",
            avatar_url="https://example.com/avatar.jpg",
            is_provider_moderator=is_moderator,
        )
