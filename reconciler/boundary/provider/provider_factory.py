"""
Provider factory.

Depends on PROVIDER_PROVIDER_TYPE. Provides a consistent provider interface
regardless of the underlying implementation.

Dependencies: reconciler.boundary.provider, reconciler.configs
System role: Provider instantiation and selection
"""

import logging

from reconciler.boundary.provider.base import ResourceProvider
from reconciler.boundary.provider.memory_provider import InMemoryProvider
from reconciler.configs import ProviderSettings, get_settings

logger = logging.getLogger(__name__)


def get_provider(settings: ProviderSettings | None = None) -> ResourceProvider:
    """
    Factory function to get a provider based on configuration.

    Args:
        settings: Provider settings (defaults to the global settings)

    Returns:
        ResourceProvider: Configured provider instance

    Raises:
        ValueError: If PROVIDER_PROVIDER_TYPE is invalid
    """
    settings = settings or get_settings().provider
    provider_type = settings.provider_type.lower()

    if provider_type == "memory":
        logger.info(f"{__name__}:get_provider - Creating in-memory provider ({settings.region})")
        return InMemoryProvider(
            region=settings.region,
            account_id=settings.account_id,
            latency_seconds=settings.latency_seconds,
        )

    raise ValueError(
        f"Invalid PROVIDER_PROVIDER_TYPE: {provider_type}. Must be 'memory'."
    )
