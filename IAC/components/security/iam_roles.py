"""
IAM roles component for compute resources.

Creates:
- EC2 instance role assumed by ec2.amazonaws.com with AmazonSSMManagedInstanceCore
  (Session Manager access without opening more ports)
- Instance profile wrapping the role for attachment to the instance
"""

from dataclasses import dataclass
from typing import Any

from reconciler.models import ResourceKind

from IAC.configs.constants import SSM_MANAGED_INSTANCE_CORE_ARN
from IAC.stack import StackComponent, StackDefinition
from IAC.utils.naming import ResourceNamer


@dataclass
class IamRoleOutputs:
    """References exported by the IAM roles component."""
    ec2_role_arn: dict[str, Any]
    ec2_instance_profile_name: dict[str, Any]


class IamRolesComponent(StackComponent):
    """IAM role and instance profile for the EC2 application server."""

    def __init__(
        self,
        stack: StackDefinition,
        name: str,
        environment: str,
        namer: ResourceNamer,
    ) -> None:
        super().__init__(stack, name, environment)

        ec2_assume_policy = {
            "Version": "2012-10-17",
            "Statement": [{
                "Effect": "Allow",
                "Principal": {"Service": "ec2.amazonaws.com"},
                "Action": "sts:AssumeRole",
            }],
        }

        self.ec2_role = self._declare("ec2-role", ResourceKind.ROLE, {
            "name": namer.name("ec2-role"),
            "assume_role_policy": ec2_assume_policy,
            "managed_policy_arns": [SSM_MANAGED_INSTANCE_CORE_ARN],
        })

        self.ec2_instance_profile = self._declare("ec2-instance-profile", ResourceKind.INSTANCE_PROFILE, {
            "name": namer.name("ec2-instance-profile"),
            "role": self.get_att(self.ec2_role, "name"),
        })

    def get_outputs(self) -> IamRoleOutputs:
        """Get IAM output references."""
        return IamRoleOutputs(
            ec2_role_arn=self.get_att(self.ec2_role, "arn"),
            ec2_instance_profile_name=self.get_att(self.ec2_instance_profile, "name"),
        )
