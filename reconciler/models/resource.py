"""
Resource definition and graph models.

Declarative input accepted by the graph builder and the immutable node graph
it produces. Property values are JSON-native; references to other resources
use CloudFormation-style intrinsics ({"Ref": id} / {"Fn::GetAtt": [id, attr]}).

Dependencies: pydantic
System role: Desired-state contracts shared by builder, differ and executor
"""

import enum
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field


class ResourceKind(str, enum.Enum):
    """
    Resource kinds the engine knows how to reconcile.

    NETWORK: VPC address space
    SUBNET: Subnet inside a network, pinned to an availability zone
    INTERNET_GATEWAY: Gateway attaching a network to the internet
    ROUTE_TABLE: Routes plus subnet associations
    SECURITY_GROUP: Stateful firewall attached to compute/database
    ROLE: IAM role assumed by a service principal
    INSTANCE_PROFILE: Wrapper passing a role to compute
    COMPUTE: Virtual machine instance
    DB_SUBNET_GROUP: Subnet placement for a database
    DATABASE: Managed relational database instance (stateful)
    """

    NETWORK = "network"
    SUBNET = "subnet"
    INTERNET_GATEWAY = "internet_gateway"
    ROUTE_TABLE = "route_table"
    SECURITY_GROUP = "security_group"
    ROLE = "role"
    INSTANCE_PROFILE = "instance_profile"
    COMPUTE = "compute"
    DB_SUBNET_GROUP = "db_subnet_group"
    DATABASE = "database"


class RemovalPolicy(str, enum.Enum):
    """
    What happens to the physical resource when its logical id is deleted.

    DESTROY: Delete the physical resource through the provider
    RETAIN: Forget it in state but leave it running in the cloud
    """

    DESTROY = "destroy"
    RETAIN = "retain"


class ResourceDefinition(BaseModel):
    """Canonical, author-facing declaration of one resource."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    logical_id: str = Field(min_length=1, description="Stable author-assigned identifier")
    kind: ResourceKind = Field(description="Resource kind")
    properties: dict[str, Any] = Field(
        default_factory=dict,
        description="Declared properties; values may embed Ref/Fn::GetAtt intrinsics",
    )
    removal_policy: RemovalPolicy = Field(
        default=RemovalPolicy.DESTROY,
        description="Behaviour when the resource is removed from the definition set",
    )


class ResourceNode(BaseModel):
    """Resource definition with its references resolved into dependency edges."""

    model_config = ConfigDict(frozen=True)

    logical_id: str
    kind: ResourceKind
    properties: dict[str, Any] = Field(default_factory=dict)
    removal_policy: RemovalPolicy = RemovalPolicy.DESTROY
    dependencies: tuple[str, ...] = Field(
        default=(),
        description="Logical ids this node references, in first-reference order",
    )
    declaration_index: int = Field(ge=0, description="Position in the definition set")


class ResourceGraph(BaseModel):
    """
    Directed acyclic graph of resource nodes.

    Nodes are kept in declaration order; `order` holds a topological order
    (dependencies first, ties broken by declaration order) computed by the
    builder. Instances are rebuilt per run and never mutated.
    """

    model_config = ConfigDict(frozen=True)

    nodes: dict[str, ResourceNode] = Field(default_factory=dict)
    order: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, logical_id: object) -> bool:
        return logical_id in self.nodes

    def iter_nodes(self) -> Iterator[ResourceNode]:
        """Nodes in declaration order."""
        return iter(self.nodes.values())

    def get(self, logical_id: str) -> ResourceNode | None:
        """Return the node for a logical id, if declared."""
        return self.nodes.get(logical_id)

    def topological_order(self) -> list[str]:
        """Logical ids with every dependency listed before its dependents."""
        return list(self.order)

    def dependents_of(self, logical_id: str) -> list[str]:
        """Direct dependents of a node, in declaration order."""
        return [
            node.logical_id
            for node in self.nodes.values()
            if logical_id in node.dependencies
        ]

    @property
    def edge_count(self) -> int:
        """Number of dependency edges in the graph."""
        return sum(len(node.dependencies) for node in self.nodes.values())
