"""
VPC Component for Network Infrastructure.

Steps & Architecture:
1. VPC (10.0.0.0/16): The isolated network container.
2. Internet Gateway (IGW): Attached to the VPC, the path in and out for public subnets.
3. Subnets, one per tier and AZ (two AZs):
   - Public (10.0.0.0/24, 10.0.1.0/24): EC2 application server, public IPs on launch.
   - Private isolated (10.0.2.0/24, 10.0.3.0/24): RDS MySQL, no internet route.
4. Route Tables:
   - Public RT: 0.0.0.0/0 -> IGW, associated with both public subnets.
   - Private RT: No routes beyond the implicit "local" route, associated with both private subnets.

Internal traffic (EC2 -> RDS) uses the local route and never leaves the VPC.
"""

from dataclasses import dataclass
from typing import Any

from reconciler.models import ResourceKind

from IAC.configs.base import EnvironmentConfig
from IAC.configs.constants import ANY_IPV4, SUBNET_CIDRS, VPC_CIDR
from IAC.stack import StackComponent, StackDefinition

_AZ_SUFFIXES = ("a", "b")


@dataclass
class VpcOutputs:
    """References exported by the VPC component."""
    vpc_id: dict[str, Any]
    internet_gateway_id: dict[str, Any]
    public_subnet_ids: list[dict[str, Any]]
    private_subnet_ids: list[dict[str, Any]]
    public_route_table_id: dict[str, Any]
    private_route_table_id: dict[str, Any]


class VpcComponent(StackComponent):
    """
    VPC with public and private isolated subnets in two AZs.

    Public subnets route to the internet gateway; private subnets have no
    internet route at all (no NAT gateway).
    """

    def __init__(
        self,
        stack: StackDefinition,
        name: str,
        config: EnvironmentConfig,
    ) -> None:
        super().__init__(stack, name, config.environment)

        self.vpc = self._declare("vpc", ResourceKind.NETWORK, {
            "cidr_block": VPC_CIDR,
            "enable_dns_hostnames": True,
            "enable_dns_support": True,
        })

        self.igw = self._declare("igw", ResourceKind.INTERNET_GATEWAY, {
            "vpc_id": self.ref(self.vpc),
        })

        self.public_subnets: list[str] = []
        self.private_subnets: list[str] = []
        for suffix, zone in zip(_AZ_SUFFIXES, config.availability_zones):
            self.public_subnets.append(
                self._declare(f"public-subnet-{suffix}", ResourceKind.SUBNET, {
                    "vpc_id": self.ref(self.vpc),
                    "cidr_block": SUBNET_CIDRS[f"public_{suffix}"],
                    "availability_zone": zone,
                    "map_public_ip_on_launch": True,
                })
            )
        for suffix, zone in zip(_AZ_SUFFIXES, config.availability_zones):
            self.private_subnets.append(
                self._declare(f"private-subnet-{suffix}", ResourceKind.SUBNET, {
                    "vpc_id": self.ref(self.vpc),
                    "cidr_block": SUBNET_CIDRS[f"private_{suffix}"],
                    "availability_zone": zone,
                    "map_public_ip_on_launch": False,
                })
            )

        self._create_route_tables()

    def _create_route_tables(self) -> None:
        """Create route tables for public and private subnets."""
        self.public_rt = self._declare("public-rt", ResourceKind.ROUTE_TABLE, {
            "vpc_id": self.ref(self.vpc),
            "routes": [
                {"cidr_block": ANY_IPV4, "gateway_id": self.ref(self.igw)},
            ],
            "subnet_ids": [self.ref(subnet) for subnet in self.public_subnets],
        })

        # Isolated: local route only
        self.private_rt = self._declare("private-rt", ResourceKind.ROUTE_TABLE, {
            "vpc_id": self.ref(self.vpc),
            "routes": [],
            "subnet_ids": [self.ref(subnet) for subnet in self.private_subnets],
        })

    def get_outputs(self) -> VpcOutputs:
        """Get VPC output references."""
        return VpcOutputs(
            vpc_id=self.ref(self.vpc),
            internet_gateway_id=self.ref(self.igw),
            public_subnet_ids=[self.ref(subnet) for subnet in self.public_subnets],
            private_subnet_ids=[self.ref(subnet) for subnet in self.private_subnets],
            public_route_table_id=self.ref(self.public_rt),
            private_route_table_id=self.ref(self.private_rt),
        )
