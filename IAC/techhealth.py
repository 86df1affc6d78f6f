"""
TechHealth migration stack.

Declares every component in dependency order:
1. VPC (2 AZs, public + private isolated subnets)
2. Security Groups (EC2, RDS)
3. IAM Role + Instance Profile (SSM)
4. EC2 instance (public subnet)
5. RDS MySQL (private isolated subnets)
"""

import logging
from pathlib import Path
from typing import Any

from reconciler.application.services import ReconcileService
from reconciler.models import ApplyReport, ResourceDefinition

from IAC.components.compute.ec2_instance import Ec2InstanceComponent
from IAC.components.networking.security_groups import SecurityGroupsComponent
from IAC.components.networking.vpc import VpcComponent
from IAC.components.security.iam_roles import IamRolesComponent
from IAC.components.storage.rds_mysql import RdsMysqlComponent
from IAC.configs.base import EnvironmentConfig
from IAC.configs.environment import get_config
from IAC.stack import StackDefinition
from IAC.utils.naming import ResourceNamer
from IAC.utils.outputs import resolve_outputs, write_outputs_to_env

logger = logging.getLogger(__name__)


def create_techhealth_stack(config: EnvironmentConfig | None = None) -> StackDefinition:
    """
    Declare the TechHealth stack with its outputs.

    Args:
        config: Environment configuration (defaults to STACK_* settings)

    Returns:
        StackDefinition: Definitions plus exported output references
    """
    config = config or get_config()
    namer = ResourceNamer(project=config.project, environment=config.environment)
    base_name = namer.base
    stack = StackDefinition(base_name)

    # --- Layer 1: Networking Foundation ---
    vpc = VpcComponent(stack, base_name, config)
    vpc_outputs = vpc.get_outputs()

    security_groups = SecurityGroupsComponent(
        stack,
        base_name,
        config.environment,
        vpc_id=vpc_outputs.vpc_id,
    )
    sg_outputs = security_groups.get_outputs()

    # --- Layer 2: IAM ---
    iam_roles = IamRolesComponent(stack, base_name, config.environment, namer)
    iam_outputs = iam_roles.get_outputs()

    # --- Layer 3: Compute ---
    ec2 = Ec2InstanceComponent(
        stack,
        base_name,
        config,
        subnet_id=vpc_outputs.public_subnet_ids[0],
        security_group_id=sg_outputs.ec2_sg_id,
        instance_profile_name=iam_outputs.ec2_instance_profile_name,
    )
    ec2_outputs = ec2.get_outputs()

    # --- Layer 4: Data ---
    rds = RdsMysqlComponent(
        stack,
        base_name,
        config,
        namer,
        subnet_ids=vpc_outputs.private_subnet_ids,
        security_group_id=sg_outputs.rds_sg_id,
    )
    rds_outputs = rds.get_outputs()

    # --- Exports ---
    stack.export("vpc_id", vpc_outputs.vpc_id)
    stack.export("ec2_instance_id", ec2_outputs.instance_id)
    stack.export("ec2_public_dns", ec2_outputs.public_dns)
    stack.export("ec2_role_arn", iam_outputs.ec2_role_arn)
    stack.export("rds_endpoint", rds_outputs.endpoint)
    stack.export("rds_port", rds_outputs.port)

    return stack


def build_techhealth_stack(config: EnvironmentConfig | None = None) -> list[ResourceDefinition]:
    """
    Definitions of the TechHealth stack in declaration order.

    Args:
        config: Environment configuration (defaults to STACK_* settings)

    Returns:
        list[ResourceDefinition]: Definition set for the engine
    """
    return create_techhealth_stack(config).definitions


async def deploy_techhealth_stack(
    service: ReconcileService,
    config: EnvironmentConfig | None = None,
    outputs_path: str | Path | None = None,
) -> tuple[ApplyReport, dict[str, Any]]:
    """
    Apply the TechHealth stack and resolve its outputs.

    Args:
        service: Reconcile service wired to a state store and provider
        config: Environment configuration (defaults to STACK_* settings)
        outputs_path: Dotenv file receiving the outputs after a successful apply

    Returns:
        tuple: Apply report and output name -> deployed value

    Raises:
        DestructiveChangeError: If the plan would destroy the database without approval
    """
    stack = create_techhealth_stack(config)
    report = await service.apply(stack.definitions)
    outputs = resolve_outputs(stack.outputs, await service.state_store.load())

    for line in report.summary_lines():
        logger.info(f"{__name__}:deploy_techhealth_stack - {line}")
    if outputs_path is not None and report.succeeded:
        write_outputs_to_env(outputs, outputs_path)
    return report, outputs
