"""
Executor configuration settings.

Concurrency, per-call deadline and retry policy for provider calls.

Dependencies: pydantic, pydantic_settings
System role: Apply-run tuning
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from reconciler.configs.base import BaseSettings


class ExecutorSettings(BaseSettings):
    """Executor scheduling and retry configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EXECUTOR_",
        case_sensitive=False,
        extra="ignore",
    )

    max_concurrency: int = Field(default=4, ge=1, description="Entries in flight at once")
    operation_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Deadline for a single provider call",
    )
    max_attempts: int = Field(
        default=5,
        ge=1,
        description="Provider call attempts for transient errors, first call included",
    )
    retry_initial_backoff_seconds: float = Field(default=1.0, ge=0)
    retry_max_backoff_seconds: float = Field(default=30.0, ge=0)
    retry_jitter_seconds: float = Field(default=1.0, ge=0)
