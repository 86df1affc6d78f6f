"""
Provider configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Provider selection for the executor
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from reconciler.configs.base import BaseSettings


class ProviderSettings(BaseSettings):
    """Cloud provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROVIDER_",
        case_sensitive=False,
        extra="ignore",
    )

    provider_type: str = Field(
        default="memory",
        description="Provider implementation: memory",
    )
    region: str = Field(default="us-east-1", description="Region used in ARNs and endpoints")
    account_id: str = Field(default="123456789012", description="Account id used in ARNs")
    latency_seconds: float = Field(
        default=0.0,
        ge=0,
        description="Simulated latency per provider call",
    )
