"""Test harness for unit, integration and API tests.

Integration tests assume a PostgreSQL database is already running and
migrated. Settings are loaded from environment variables (configure via
.env or export).
"""

import pytest
import pytest_asyncio
from dishka import Provider
from fastapi.testclient import TestClient

from remark.interface.api.app import create_app
from remark.util.di import Component
from tests.di import build_test_container


def create_env_fixture(
    unmock: set[Component] | None = None,
    overrides: list[Provider] | None = None,
):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that:
    - Builds a test container with specified unmocking
    - Yields request-scoped container for service access
    - Settings loaded from environment automatically

    Args:
        unmock: Components to use real implementations for
        overrides: Providers that replace bindings, e.g. failing repositories

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Unit tests - everything mocked, no database needed
        unit_env = create_env_fixture()

        # Integration tests - real persistence, assumes postgres running
        integration_env = create_env_fixture(unmock={"persistence"})

        @pytest.mark.asyncio
        async def test_create_comment(unit_env):
            service = await unit_env.get(CommentService)
            ...
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        container = build_test_container(
            unmock=unmock or set(), overrides=overrides
        )

        # Open request-scoped context
        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment


def create_client_fixture(unmock: set[Component] | None = None):
    """Factory for fixtures that yield a TestClient over a mocked app.

    Each test gets a fresh container, so in-memory state is shared by the
    requests of one test only.

    Args:
        unmock: Components to use real implementations for

    Returns:
        Pytest fixture function that yields TestClient
    """

    @pytest.fixture
    def _client():
        container = build_test_container(unmock=unmock or set(), for_api=True)
        with TestClient(create_app(container=container)) as client:
            yield client

    return _client
