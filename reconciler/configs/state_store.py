"""
State store configuration settings.

Selects the database holding the last-known deployed state.

Dependencies: pydantic, pydantic_settings
System role: State store connection configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from reconciler.configs.base import BaseSettings


class StateStoreSettings(BaseSettings):
    """Deployed-state database configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STATE_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str = Field(
        default="sqlite+aiosqlite:///reconciler_state.db",
        description="SQLAlchemy async database URL",
    )
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")
    pool_size: int = Field(default=5, description="Connection pool size (server databases only)")
    max_overflow: int = Field(default=10, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Connection pool timeout in seconds")

    @property
    def is_sqlite(self) -> bool:
        """True when the URL points at a SQLite database."""
        return self.url.startswith("sqlite")

    @property
    def is_memory(self) -> bool:
        """True for an in-memory SQLite database."""
        return self.is_sqlite and (":memory:" in self.url or self.url.endswith("://"))
