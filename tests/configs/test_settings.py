"""Tests for engine settings loading."""

import pytest
from pydantic import ValidationError

from reconciler.boundary.db.connection import get_async_engine
from reconciler.configs import (
    ExecutorSettings,
    Settings,
    StateStoreSettings,
    get_settings,
)


class TestStateStoreSettings:
    """Tests for StateStoreSettings."""

    @pytest.mark.parametrize(
        ("url", "is_sqlite", "is_memory"),
        [
            ("sqlite+aiosqlite:///:memory:", True, True),
            ("sqlite+aiosqlite://", True, True),
            ("sqlite+aiosqlite:///reconciler_state.db", True, False),
            ("postgresql+asyncpg://user:pw@localhost/state", False, False),
        ],
    )
    def test_url_classification(self, url: str, is_sqlite: bool, is_memory: bool) -> None:
        settings = StateStoreSettings(url=url)

        assert settings.is_sqlite is is_sqlite
        assert settings.is_memory is is_memory

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STATE_STORE_URL", "sqlite+aiosqlite:///other.db")
        monkeypatch.setenv("STATE_STORE_ECHO_SQL", "true")

        settings = StateStoreSettings()

        assert settings.url == "sqlite+aiosqlite:///other.db"
        assert settings.echo_sql is True

    @pytest.mark.asyncio
    async def test_memory_engine_uses_static_pool(self, memory_db_settings: StateStoreSettings) -> None:
        engine = get_async_engine(memory_db_settings)
        try:
            assert type(engine.pool).__name__ == "StaticPool"
        finally:
            await engine.dispose()


class TestExecutorSettings:
    """Tests for ExecutorSettings."""

    def test_defaults(self) -> None:
        settings = ExecutorSettings()

        assert settings.max_concurrency == 4
        assert settings.max_attempts == 5
        assert settings.operation_timeout_seconds == 300

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXECUTOR_MAX_CONCURRENCY", "8")

        assert ExecutorSettings().max_concurrency == 8


class TestSettings:
    """Tests for the aggregated Settings."""

    def test_aggregates_sections(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("POLICY_REQUIRE_STATEFUL_CONFIRMATION", "false")
        monkeypatch.setenv("PROVIDER_REGION", "eu-central-1")

        settings = Settings()

        assert settings.policy.require_stateful_confirmation is False
        assert settings.provider.region == "eu-central-1"
        assert settings.log_level == "INFO"

    def test_log_level_is_case_insensitive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert Settings().log_level == "DEBUG"

    def test_unknown_log_level_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

    def test_get_settings_is_cached(self) -> None:
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
