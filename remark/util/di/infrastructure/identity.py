"""Identity provider infrastructure providers."""

from dishka import Scope, provide

from remark.adapter.identity import IdentityClient, RealGraphQLIdentityClient
from remark.config import IdentitySettings
from remark.util.di.base import ProviderBase


class IdentityProvider(ProviderBase):
    """Identity component base."""

    __mock_component__ = "identity"


class ProdIdentityProvider(IdentityProvider):
    """Production identity provider backed by the GraphQL API."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_identity_client(self, settings: IdentitySettings) -> IdentityClient:
        """Provide identity provider client.

        Raises:
            ValueError: If the GraphQL endpoint is not configured
        """
        if not settings.graphql_url:
            raise ValueError("Identity provider GraphQL URL must be configured")

        return RealGraphQLIdentityClient(
            graphql_url=settings.graphql_url,
            timeout=settings.timeout,
        )
