"""
SQL-backed state store.

Persists deployed state through SQLAlchemy async sessions: one row per
logical id plus a serial row. Every commit is its own transaction, so the
row write and the serial bump land together or not at all.

Dependencies: sqlalchemy, pydantic, reconciler.boundary.db
System role: Default StateStore implementation
"""

import asyncio
import logging

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from reconciler.boundary.db.base import Base
from reconciler.boundary.db.connection import get_async_engine, get_async_session_factory
from reconciler.boundary.db.CRUD import deployed_resource_crud, state_serial_crud
from reconciler.configs import StateStoreSettings
from reconciler.core.exceptions import CorruptStateError, StateStoreError
from reconciler.models.state import DeployedResource, StateSnapshot

logger = logging.getLogger(__name__)


class SqlStateStore:
    """
    State store over a SQLAlchemy async engine.

    Usage:
        store = SqlStateStore.from_settings(settings.state_store)
        await store.initialize()
        snapshot = await store.load()
    """

    def __init__(self, engine: AsyncEngine) -> None:
        """
        Initialize the store on an existing engine.

        Args:
            engine: Async engine for the state database
        """
        self.engine = engine
        self._session_factory = get_async_session_factory(engine)
        self._write_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: StateStoreSettings | None = None) -> "SqlStateStore":
        """
        Build a store with an engine created from settings.

        Args:
            settings: State store settings (defaults to the global settings)

        Returns:
            SqlStateStore: Store that owns its engine
        """
        return cls(get_async_engine(settings))

    async def initialize(self) -> None:
        """
        Create the state tables if they do not exist.

        Raises:
            StateStoreError: If table creation fails
        """
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:initialize - Failed to create state tables: {e}")
            raise StateStoreError(f"Failed to initialize state store: {e}", operation="initialize") from e
        logger.info(f"{__name__}:initialize - State tables ready")

    async def load(self) -> StateSnapshot:
        """
        Read the full snapshot.

        Returns:
            StateSnapshot: Version plus every deployed resource in insertion order

        Raises:
            CorruptStateError: If a row cannot be parsed into a DeployedResource
            StateStoreError: If the database cannot be read
        """
        try:
            async with self._session_factory() as session:
                version = await state_serial_crud.get_serial(session)
                rows = await deployed_resource_crud.get_all_ordered(session)
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:load - Database error: {e}")
            raise StateStoreError(f"Failed to load state: {e}", operation="load") from e
        except (ValueError, TypeError) as e:
            # JSON columns are decoded while rows are fetched
            logger.error(f"{__name__}:load - Undecodable state row: {e}")
            raise CorruptStateError(f"Persisted state is not valid JSON: {e}") from e

        resources: dict[str, DeployedResource] = {}
        for row in rows:
            try:
                resources[row.logical_id] = DeployedResource.model_validate({
                    "physical_id": row.physical_id,
                    "kind": row.kind,
                    "properties": row.properties,
                    "outputs": row.outputs,
                    "dependencies": row.dependencies,
                    "removal_policy": row.removal_policy,
                })
            except ValidationError as e:
                logger.error(f"{__name__}:load - Corrupt row for {row.logical_id}: {e}")
                raise CorruptStateError(
                    f"Persisted state for {row.logical_id} is malformed: {e}",
                    logical_id=row.logical_id,
                ) from e

        logger.debug(f"{__name__}:load - Loaded {len(resources)} resources at v{version}")
        return StateSnapshot(version=version, resources=resources)

    async def commit(self, logical_id: str, resource: DeployedResource | None) -> int:
        """
        Atomically set or remove one logical id and bump the version.

        Args:
            logical_id: Resource to write
            resource: New deployed description, or None to remove the entry

        Returns:
            int: Snapshot version after the commit

        Raises:
            StateStoreError: If the transaction fails (nothing is written)
        """
        async with self._write_lock:
            try:
                async with self._session_factory() as session:
                    async with session.begin():
                        if resource is None:
                            await deployed_resource_crud.delete_by_key(session, logical_id)
                        else:
                            await deployed_resource_crud.upsert(
                                session,
                                logical_id,
                                physical_id=resource.physical_id,
                                kind=resource.kind.value,
                                properties=resource.properties,
                                outputs=resource.outputs,
                                dependencies=list(resource.dependencies),
                                removal_policy=resource.removal_policy.value,
                            )
                        version = await state_serial_crud.bump(session)
            except SQLAlchemyError as e:
                logger.error(f"{__name__}:commit - Failed to commit {logical_id}: {e}")
                raise StateStoreError(
                    f"Failed to commit state for {logical_id}: {e}",
                    operation="commit",
                    details={"logical_id": logical_id},
                ) from e

        action = "removed" if resource is None else "stored"
        logger.debug(f"{__name__}:commit - {logical_id} {action}, state now v{version}")
        return version

    async def close(self) -> None:
        """Dispose the engine and its pooled connections."""
        await self.engine.dispose()
