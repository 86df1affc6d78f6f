"""
Cloud provider boundary.

Exports:
  - ResourceProvider, ProviderResult: Contract used by the executor
  - InMemoryProvider: Simulated control plane
  - get_provider(): Settings-driven factory
"""

from reconciler.boundary.provider.base import ProviderResult, ResourceProvider
from reconciler.boundary.provider.memory_provider import InMemoryProvider
from reconciler.boundary.provider.provider_factory import get_provider

__all__ = [
    "InMemoryProvider",
    "ProviderResult",
    "ResourceProvider",
    "get_provider",
]
