"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from reconciler.configs.executor import ExecutorSettings
from reconciler.configs.policy import PolicySettings
from reconciler.configs.provider import ProviderSettings
from reconciler.configs.settings import Settings, get_settings
from reconciler.configs.state_store import StateStoreSettings

__all__ = [
    "ExecutorSettings",
    "PolicySettings",
    "ProviderSettings",
    "Settings",
    "StateStoreSettings",
    "get_settings",
]
