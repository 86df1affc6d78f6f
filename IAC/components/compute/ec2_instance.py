"""
EC2 Instance Component for the application server.

Key Components:
1. AMI: Latest Amazon Linux 2, resolved from the public SSM parameter at create time.
2. Placement: First PUBLIC subnet with a public IP, so SSH and HTTP reach it directly.
3. Security group: SSH (22) and HTTP (80) from anywhere.
4. Instance Profile: Links the SSM role, enabling Session Manager access.
5. IMDSv2 (http_tokens="required"): Secures the metadata service against SSRF.
"""

from dataclasses import dataclass
from typing import Any

from reconciler.models import ResourceKind

from IAC.configs.base import EnvironmentConfig
from IAC.configs.constants import AMAZON_LINUX_2_AMI
from IAC.stack import StackComponent, StackDefinition


@dataclass
class Ec2Outputs:
    """References exported by the EC2 component."""
    instance_id: dict[str, Any]
    private_ip: dict[str, Any]
    public_dns: dict[str, Any]


class Ec2InstanceComponent(StackComponent):
    """Single EC2 instance in a public subnet."""

    def __init__(
        self,
        stack: StackDefinition,
        name: str,
        config: EnvironmentConfig,
        subnet_id: dict[str, Any],
        security_group_id: dict[str, Any],
        instance_profile_name: dict[str, Any],
    ) -> None:
        super().__init__(stack, name, config.environment)

        self.instance = self._declare(
            "ec2",
            ResourceKind.COMPUTE,
            {
                "ami": AMAZON_LINUX_2_AMI,
                "instance_type": config.ec2_instance_type,
                "subnet_id": subnet_id,
                "security_group_ids": [security_group_id],
                "iam_instance_profile": instance_profile_name,
                "associate_public_ip_address": True,
                "metadata_options": {"http_tokens": "required", "http_endpoint": "enabled"},
                "monitoring": config.is_production,
            },
            extra_tags={"Role": "app-server"},
        )

    def get_outputs(self) -> Ec2Outputs:
        """Get EC2 output references."""
        return Ec2Outputs(
            instance_id=self.ref(self.instance),
            private_ip=self.get_att(self.instance, "private_ip"),
            public_dns=self.get_att(self.instance, "public_dns"),
        )
