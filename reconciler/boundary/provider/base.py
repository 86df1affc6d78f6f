"""
Provider contract.

Dependencies: pydantic, reconciler.models
System role: Interface between the executor and a cloud control plane
"""

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from reconciler.models.resource import ResourceKind


class ProviderResult(BaseModel):
    """Outcome of a successful create or update."""

    physical_id: str = Field(min_length=1, description="Identifier assigned by the provider")
    outputs: dict[str, Any] = Field(
        default_factory=dict,
        description="Final property values, including derived attributes",
    )


@runtime_checkable
class ResourceProvider(Protocol):
    """
    Cloud control plane operations.

    Implementations raise ProviderOperationError on failure and set
    `transient` (or raise ProviderThrottlingError) when a retry may help.
    Properties passed in are fully resolved: no reference intrinsics remain.
    """

    async def create(
        self,
        kind: ResourceKind,
        logical_id: str,
        properties: dict[str, Any],
    ) -> ProviderResult:
        """Create a physical resource."""
        ...

    async def update(
        self,
        kind: ResourceKind,
        physical_id: str,
        properties: dict[str, Any],
        changed: list[str],
    ) -> ProviderResult:
        """Update mutable properties of an existing physical resource in place."""
        ...

    async def delete(self, kind: ResourceKind, physical_id: str) -> None:
        """Delete a physical resource; deleting an absent resource succeeds."""
        ...
