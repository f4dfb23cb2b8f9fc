"""Registry of AI provider backends."""

import logging

from ..errors import DevpilotError
from ..provider import AIProvider
from .mock import MockProvider

logger = logging.getLogger(__name__)

PROVIDERS: dict[str, type[AIProvider]] = {
    MockProvider.name: MockProvider,
}

DEFAULT_PROVIDER = MockProvider.name


def get_provider(name: str | None = None) -> AIProvider:
    """Return an instance of the named provider (default: mock)."""
    name = name or DEFAULT_PROVIDER
    provider_class = PROVIDERS.get(name)
    if provider_class is None:
        raise DevpilotError(
            "PROVIDER_NOT_FOUND",
            f"Unknown AI provider: {name} (available: {', '.join(sorted(PROVIDERS))})",
            {"provider": name},
        )
    return provider_class()


def available_providers() -> list[AIProvider]:
    """Return the registered providers that report themselves available."""
    providers = []
    for ProviderClass in PROVIDERS.values():
        provider = ProviderClass()
        if provider.is_available():
            providers.append(provider)
        else:
            logger.debug("Provider %s is not available", provider.name)
    return providers
