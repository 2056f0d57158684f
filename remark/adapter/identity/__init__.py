"""Identity provider adapter."""

from .client import IdentityClient, MockIdentityClient, RealGraphQLIdentityClient

__all__ = ["IdentityClient", "RealGraphQLIdentityClient", "MockIdentityClient"]
