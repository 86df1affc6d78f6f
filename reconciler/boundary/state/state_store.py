"""
State store contract.

Dependencies: reconciler.models
System role: Interface between the executor and persisted deployed state
"""

from typing import Protocol, runtime_checkable

from reconciler.models.state import DeployedResource, StateSnapshot


@runtime_checkable
class StateStore(Protocol):
    """
    Durable last-known deployed state.

    load() returns a consistent snapshot; commit() atomically sets or
    removes one logical id and bumps the snapshot version.
    """

    async def load(self) -> StateSnapshot:
        """Read the full snapshot."""
        ...

    async def commit(self, logical_id: str, resource: DeployedResource | None) -> int:
        """Persist one entry (None removes it); return the new version."""
        ...
