"""
Security Groups Component for Network Access Control.

Access Patterns:
- EC2: Accepts SSH (22) and HTTP (80) from anywhere.
- RDS: Accepts MySQL (3306) ONLY from the EC2 security group (identity-based,
  not IP-based). Rejects everything else.
- Both allow all outbound traffic.

Security Groups are stateful: allowing an inbound request automatically
allows the reply.
"""

from dataclasses import dataclass
from typing import Any

from reconciler.models import ResourceKind

from IAC.configs.constants import ANY_IPV4, PORTS
from IAC.stack import StackComponent, StackDefinition

ALLOW_ALL_OUTBOUND: list[dict[str, Any]] = [
    {"protocol": "-1", "from_port": 0, "to_port": 0, "cidr_blocks": [ANY_IPV4]},
]


def _tcp_rule(port: int, description: str, **source: Any) -> dict[str, Any]:
    return {
        "protocol": "tcp",
        "from_port": port,
        "to_port": port,
        "description": description,
        **source,
    }


@dataclass
class SecurityGroupOutputs:
    """References exported by the security groups component."""
    ec2_sg_id: dict[str, Any]
    rds_sg_id: dict[str, Any]


class SecurityGroupsComponent(StackComponent):
    """Security groups for the application server and the database."""

    def __init__(
        self,
        stack: StackDefinition,
        name: str,
        environment: str,
        vpc_id: dict[str, Any],
    ) -> None:
        super().__init__(stack, name, environment)

        self.ec2_sg = self._declare("ec2-sg", ResourceKind.SECURITY_GROUP, {
            "vpc_id": vpc_id,
            "description": "EC2 Security Group for EC2 instance",
            "ingress": [
                _tcp_rule(PORTS["ssh"], "Allow SSH", cidr_blocks=[ANY_IPV4]),
                _tcp_rule(PORTS["http"], "Allow HTTP", cidr_blocks=[ANY_IPV4]),
            ],
            "egress": ALLOW_ALL_OUTBOUND,
        })

        self.rds_sg = self._declare("rds-sg", ResourceKind.SECURITY_GROUP, {
            "vpc_id": vpc_id,
            "description": "Security Group for RDS instance",
            "ingress": [
                _tcp_rule(
                    PORTS["mysql"],
                    "Allow MySQL from EC2",
                    source_security_group_id=self.ref(self.ec2_sg),
                ),
            ],
            "egress": ALLOW_ALL_OUTBOUND,
        })

    def get_outputs(self) -> SecurityGroupOutputs:
        """Get security group output references."""
        return SecurityGroupOutputs(
            ec2_sg_id=self.ref(self.ec2_sg),
            rds_sg_id=self.ref(self.rds_sg),
        )
