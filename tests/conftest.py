"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory state store, simulated provider, fast executor settings,
sample definition sets
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import pytest

from reconciler.boundary.db.connection import get_async_engine
from reconciler.boundary.provider.memory_provider import InMemoryProvider
from reconciler.boundary.state.sql_state_store import SqlStateStore
from reconciler.configs import (
    ExecutorSettings,
    PolicySettings,
    ProviderSettings,
    Settings,
    StateStoreSettings,
)
from reconciler.core.executor import Executor
from reconciler.core.references import ref
from reconciler.models import RemovalPolicy, ResourceDefinition, ResourceKind


@pytest.fixture
def memory_db_settings() -> StateStoreSettings:
    """State store settings pointing at an in-memory SQLite database."""
    return StateStoreSettings(url="sqlite+aiosqlite:///:memory:")


@pytest.fixture
def executor_settings() -> ExecutorSettings:
    """Executor settings with short deadlines and no backoff."""
    return ExecutorSettings(
        max_concurrency=4,
        operation_timeout_seconds=1.0,
        max_attempts=3,
        retry_initial_backoff_seconds=0,
        retry_max_backoff_seconds=0,
        retry_jitter_seconds=0,
    )


@pytest.fixture
def settings(
    memory_db_settings: StateStoreSettings,
    executor_settings: ExecutorSettings,
) -> Settings:
    """Engine settings for tests."""
    return Settings(
        state_store=memory_db_settings,
        executor=executor_settings,
        provider=ProviderSettings(provider_type="memory"),
        policy=PolicySettings(require_stateful_confirmation=True),
    )


@pytest.fixture
async def state_store(memory_db_settings: StateStoreSettings):
    """
    Create in-memory SQLite state store for testing.

    Yields:
        SqlStateStore: Store with tables created, disposed after the test
    """
    store = SqlStateStore(get_async_engine(memory_db_settings))
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def provider() -> InMemoryProvider:
    """Simulated provider without latency."""
    return InMemoryProvider()


@pytest.fixture
def executor(
    state_store: SqlStateStore,
    provider: InMemoryProvider,
    executor_settings: ExecutorSettings,
) -> Executor:
    """Executor wired to the in-memory store and provider."""
    return Executor(state_store, provider, executor_settings)


def make_chain(cidr_block: str = "10.0.0.0/16", instance_type: str = "t3.micro") -> list[ResourceDefinition]:
    """Network A <- SecurityGroup B <- Compute C."""
    return [
        ResourceDefinition(
            logical_id="A",
            kind=ResourceKind.NETWORK,
            properties={"cidr_block": cidr_block, "tags": {"Name": "A"}},
        ),
        ResourceDefinition(
            logical_id="B",
            kind=ResourceKind.SECURITY_GROUP,
            properties={"vpc_id": ref("A"), "description": "app"},
        ),
        ResourceDefinition(
            logical_id="C",
            kind=ResourceKind.COMPUTE,
            properties={"instance_type": instance_type, "security_group_ids": [ref("B")]},
        ),
    ]


def make_database(
    removal_policy: RemovalPolicy = RemovalPolicy.DESTROY,
    allocated_storage: int = 20,
) -> ResourceDefinition:
    """Standalone stateful resource."""
    return ResourceDefinition(
        logical_id="DB",
        kind=ResourceKind.DATABASE,
        properties={"engine": "mysql", "allocated_storage": allocated_storage},
        removal_policy=removal_policy,
    )


@pytest.fixture
def chain_definitions() -> list[ResourceDefinition]:
    """Network A <- SecurityGroup B <- Compute C."""
    return make_chain()


@pytest.fixture
def chain_factory():
    """Factory for the A <- B <- C chain with configurable properties."""
    return make_chain


@pytest.fixture
def database_factory():
    """Factory for a standalone database definition."""
    return make_database
