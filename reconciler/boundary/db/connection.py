"""
Database connection management.

Provides the async SQLAlchemy engine and session factory for the state
store. SQLite files use the driver's default pool; in-memory SQLite shares a
single connection so every session sees the same database.

Dependencies: sqlalchemy, reconciler.configs
System role: Database connection lifecycle management
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from reconciler.configs import StateStoreSettings, get_settings


def get_async_engine(db_config: StateStoreSettings | None = None) -> AsyncEngine:
    """
    Create async SQLAlchemy engine for the configured state database.

    Server databases get a sized pool with pool_pre_ping=True to detect
    stale connections early.

    Args:
        db_config: State store settings (defaults to the global settings)

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Raises:
        ArgumentError: If database URL is invalid or engine creation fails

    Usage:
        engine = get_async_engine()
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    db_config = db_config or get_settings().state_store

    options: dict[str, Any] = {"echo": db_config.echo_sql}
    if db_config.is_memory:
        options.update(
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    elif not db_config.is_sqlite:
        options.update(
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_pre_ping=True,
        )

    return create_async_engine(db_config.url, **options)


def get_async_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """
    Create async session factory for database operations.

    Returns async_sessionmaker bound to engine with autoflush=False for
    explicit transaction control and predictable behavior.

    Args:
        engine: Engine to bind sessions to

    Returns:
        async_sessionmaker: Async session factory configured for manual transaction control

    Usage:
        SessionFactory = get_async_session_factory(engine)
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )
