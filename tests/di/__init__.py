"""Mock providers for testing."""

from .identity import MockIdentityProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container, build_test_providers

__all__ = [
    "MockIdentityProvider",
    "MockPersistenceProvider",
    "build_test_container",
    "build_test_providers",
]
