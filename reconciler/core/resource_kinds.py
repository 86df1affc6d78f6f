"""
Resource kind catalog.

For every kind: which properties the provider can change in place, whether
the kind holds data, and how its physical ids and ARNs look. A changed
property not listed as mutable forces a replacement.

Dependencies: None
System role: Update-vs-replace rules used by the differ
"""

from dataclasses import dataclass, field
from typing import Final, Iterable

from reconciler.models.resource import ResourceKind


@dataclass(frozen=True)
class KindSpec:
    """
    Reconciliation rules for one resource kind.

    Attributes:
        kind: Resource kind
        mutable_properties: Properties the provider updates in place
        stateful: Kind holds data that a delete would destroy
        id_prefix: Prefix of provider-assigned physical ids
        arn_service: Service segment used when building ARNs
    """
    kind: ResourceKind
    mutable_properties: frozenset[str] = field(default_factory=frozenset)
    stateful: bool = False
    id_prefix: str = "res"
    arn_service: str = "ec2"

    def is_mutable(self, property_name: str) -> bool:
        """Check whether a property can change without replacement."""
        return property_name in self.mutable_properties


KIND_CATALOG: Final[dict[ResourceKind, KindSpec]] = {
    ResourceKind.NETWORK: KindSpec(
        kind=ResourceKind.NETWORK,
        mutable_properties=frozenset({"tags", "enable_dns_hostnames", "enable_dns_support"}),
        id_prefix="vpc",
    ),
    ResourceKind.SUBNET: KindSpec(
        kind=ResourceKind.SUBNET,
        mutable_properties=frozenset({"tags", "map_public_ip_on_launch"}),
        id_prefix="subnet",
    ),
    ResourceKind.INTERNET_GATEWAY: KindSpec(
        kind=ResourceKind.INTERNET_GATEWAY,
        mutable_properties=frozenset({"tags", "vpc_id"}),
        id_prefix="igw",
    ),
    ResourceKind.ROUTE_TABLE: KindSpec(
        kind=ResourceKind.ROUTE_TABLE,
        mutable_properties=frozenset({"tags", "routes", "subnet_ids"}),
        id_prefix="rtb",
    ),
    ResourceKind.SECURITY_GROUP: KindSpec(
        kind=ResourceKind.SECURITY_GROUP,
        mutable_properties=frozenset({"tags", "ingress", "egress"}),
        id_prefix="sg",
    ),
    ResourceKind.ROLE: KindSpec(
        kind=ResourceKind.ROLE,
        mutable_properties=frozenset({
            "tags",
            "assume_role_policy",
            "managed_policy_arns",
            "description",
            "max_session_duration",
        }),
        id_prefix="AROA",
        arn_service="iam",
    ),
    ResourceKind.INSTANCE_PROFILE: KindSpec(
        kind=ResourceKind.INSTANCE_PROFILE,
        mutable_properties=frozenset({"tags", "role"}),
        id_prefix="AIPA",
        arn_service="iam",
    ),
    ResourceKind.COMPUTE: KindSpec(
        kind=ResourceKind.COMPUTE,
        mutable_properties=frozenset({
            "tags",
            "instance_type",
            "security_group_ids",
            "iam_instance_profile",
            "monitoring",
        }),
        id_prefix="i",
    ),
    ResourceKind.DB_SUBNET_GROUP: KindSpec(
        kind=ResourceKind.DB_SUBNET_GROUP,
        mutable_properties=frozenset({"tags", "subnet_ids", "description"}),
        id_prefix="dbsubnet",
        arn_service="rds",
    ),
    ResourceKind.DATABASE: KindSpec(
        kind=ResourceKind.DATABASE,
        mutable_properties=frozenset({
            "tags",
            "instance_class",
            "allocated_storage",
            "security_group_ids",
            "backup_retention_period",
            "deletion_protection",
            "multi_az",
            "engine_version",
        }),
        stateful=True,
        id_prefix="db",
        arn_service="rds",
    ),
}


def get_kind_spec(kind: ResourceKind) -> KindSpec:
    """
    Get the catalog entry for a kind.

    Args:
        kind: Resource kind

    Returns:
        KindSpec: Rules for the kind
    """
    return KIND_CATALOG[kind]


def requires_replacement(kind: ResourceKind, changed_properties: Iterable[str]) -> bool:
    """
    Decide whether a set of property changes needs a replacement.

    Args:
        kind: Resource kind
        changed_properties: Names of properties whose value changed

    Returns:
        bool: True if any changed property is immutable for the kind
    """
    spec = get_kind_spec(kind)
    return any(not spec.is_mutable(name) for name in changed_properties)


def is_stateful(kind: ResourceKind) -> bool:
    """Check whether deleting a resource of this kind destroys data."""
    return get_kind_spec(kind).stateful
