"""Mock identity provider for testing."""

from dishka import Scope, provide

from remark.adapter.identity import IdentityClient, MockIdentityClient
from remark.util.di.infrastructure.identity import IdentityProvider


class MockIdentityProvider(IdentityProvider):
    """Mock identity provider.

    Credentials look like ``user-42`` (or ``mod-user-42`` for an account
    the provider flags as a moderator).
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_identity_client(self) -> IdentityClient:
        """Provide mock identity client."""
        return MockIdentityClient()
