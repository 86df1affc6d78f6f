"""
Policy configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Guards applied by the reconcile service before any mutation
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from reconciler.configs.base import BaseSettings


class PolicySettings(BaseSettings):
    """Destructive-change policy."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POLICY_",
        case_sensitive=False,
        extra="ignore",
    )

    require_stateful_confirmation: bool = Field(
        default=True,
        description="Refuse to delete or replace stateful resources without explicit approval",
    )
