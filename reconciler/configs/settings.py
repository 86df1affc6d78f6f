"""
Unified engine settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the engine
"""

from functools import lru_cache

from pydantic import Field

from reconciler.configs.base import BaseSettings
from reconciler.configs.executor import ExecutorSettings
from reconciler.configs.policy import PolicySettings
from reconciler.configs.provider import ProviderSettings
from reconciler.configs.state_store import StateStoreSettings


class Settings(BaseSettings):
    """Unified engine settings aggregating all config modules."""

    # Aggregated settings
    state_store: StateStoreSettings = Field(default_factory=StateStoreSettings)
    executor: ExecutorSettings = Field(default_factory=ExecutorSettings)
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    policy: PolicySettings = Field(default_factory=PolicySettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get engine settings singleton.

    Environment variables are loaded once, on first call.

    Returns:
        Settings: Engine settings instance

    Usage:
        from reconciler.configs import get_settings
        settings = get_settings()
    """
    return Settings()
