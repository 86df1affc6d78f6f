"""
Deployed state models.

Pydantic shapes for what the state store persists: one DeployedResource per
logical id plus the versioned snapshot returned by load().

Dependencies: pydantic
System role: Last-known deployed state contracts
"""

from typing import Any

from pydantic import BaseModel, Field

from reconciler.models.resource import RemovalPolicy, ResourceKind


class DeployedResource(BaseModel):
    """Last successfully applied description of one resource."""

    physical_id: str = Field(min_length=1, description="Identifier assigned by the provider")
    kind: ResourceKind = Field(description="Resource kind")
    properties: dict[str, Any] = Field(
        default_factory=dict,
        description="Declared properties as last applied (references unresolved)",
    )
    outputs: dict[str, Any] = Field(
        default_factory=dict,
        description="Final property values returned by the provider",
    )
    dependencies: list[str] = Field(
        default_factory=list,
        description="Logical ids this resource referenced when applied",
    )
    removal_policy: RemovalPolicy = Field(default=RemovalPolicy.DESTROY)


class StateSnapshot(BaseModel):
    """Versioned mapping of logical id to deployed resource."""

    version: int = Field(default=0, ge=0, description="Serial bumped on every commit")
    resources: dict[str, DeployedResource] = Field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.resources)

    def __contains__(self, logical_id: object) -> bool:
        return logical_id in self.resources

    def get(self, logical_id: str) -> DeployedResource | None:
        """Return the deployed resource for a logical id, if any."""
        return self.resources.get(logical_id)

    @property
    def logical_ids(self) -> list[str]:
        """Logical ids in persisted order."""
        return list(self.resources)
