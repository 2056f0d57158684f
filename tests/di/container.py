"""Test container builder with selective unmocking."""

from dishka import AsyncContainer, Provider, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from remark.util.di import PROVIDERS, Component, get_provider


def build_test_providers(unmock: set[Component] | None = None) -> list[Provider]:
    """Instantiate every provider, mocking all components not in ``unmock``.

    Args:
        unmock: Components to use production implementations for

    Returns:
        Provider instances ready for a container
    """
    unmock = unmock or set()
    _validate_unmock(unmock)

    provider_instances: list[Provider] = []
    for base in PROVIDERS:
        # Determine if mockable
        is_mockable = bool(base.__subclasses__())

        if not is_mockable:
            # Concrete provider - always use as-is
            provider_class = get_provider(base, use_mock=False)
        else:
            # Mockable component - check unmock list
            component_name = getattr(base, "__mock_component__", None)
            use_mock = component_name not in unmock if component_name else False
            provider_class = get_provider(base, use_mock=use_mock)

        # All providers instantiated without arguments (Settings comes from DI)
        provider_instances.append(provider_class())

    return provider_instances


def build_test_container(
    unmock: set[Component] | None = None,
    for_api: bool = False,
    overrides: list[Provider] | None = None,
) -> AsyncContainer:
    """Build test container with selective unmocking.

    Args:
        unmock: Components to use production implementations for.
                All others use mocks if available.
        for_api: Include the FastAPI integration provider so the container
                can back an application under test
        overrides: Providers appended last, replacing earlier bindings of
                the same types

    Returns:
        Configured test container

    Raises:
        ValueError: If unknown components are requested

    Examples:
        # Unit tests - all mocks
        container = build_test_container()

        # Integration tests - real persistence
        container = build_test_container(unmock={"persistence"})

        # API tests - all mocks behind the FastAPI app
        container = build_test_container(for_api=True)
    """
    providers = build_test_providers(unmock)
    if for_api:
        providers.append(FastapiProvider())
    providers.extend(overrides or [])
    return make_async_container(*providers)


def _validate_unmock(unmock: set[Component]) -> None:
    """Validate unmock configuration.

    Args:
        unmock: Set of components to unmock

    Raises:
        ValueError: If unknown components are requested
    """
    mockable_providers = [p for p in PROVIDERS if p.__subclasses__()]
    all_components = {
        getattr(p, "__mock_component__")
        for p in mockable_providers
        if hasattr(p, "__mock_component__")
    }

    unknown = unmock - all_components
    if unknown:
        raise ValueError(f"Unknown components: {unknown}")
