"""
RDS MySQL Component for the relational database.

Access Control - Who Can Connect:
1. EC2 application server (ec2_sg) -> Port 3306
2. Anyone else -> DENIED

How the Connection Works:
1. Routing: The instance lives in the private isolated subnets; EC2 reaches it
   over the implicit local route. Traffic never leaves the VPC.
2. Security Group: rds_sg only allows 3306 from ec2_sg.
3. Credentials: manage_master_user_password=True lets AWS generate the password
   and keep it in Secrets Manager.

Removal policy is DESTROY: deleting the stack deletes the database and its data
(no final snapshot).
"""

from dataclasses import dataclass
from typing import Any

from reconciler.models import RemovalPolicy, ResourceKind

from IAC.configs.base import EnvironmentConfig
from IAC.configs.constants import PORTS, RDS_DEFAULTS
from IAC.stack import StackComponent, StackDefinition
from IAC.utils.naming import ResourceNamer


@dataclass
class RdsOutputs:
    """References exported by the RDS component."""
    endpoint: dict[str, Any]
    port: dict[str, Any]
    instance_id: dict[str, Any]


class RdsMysqlComponent(StackComponent):
    """RDS MySQL 8.0 instance in the private isolated subnets."""

    def __init__(
        self,
        stack: StackDefinition,
        name: str,
        config: EnvironmentConfig,
        namer: ResourceNamer,
        subnet_ids: list[dict[str, Any]],
        security_group_id: dict[str, Any],
    ) -> None:
        super().__init__(stack, name, config.environment)

        self.subnet_group = self._declare("db-subnet-group", ResourceKind.DB_SUBNET_GROUP, {
            "name": namer.db_identifier("db-subnet-group"),
            "description": "Private isolated subnets for RDS MySQL",
            "subnet_ids": list(subnet_ids),
        })

        self.instance = self._declare(
            "rds",
            ResourceKind.DATABASE,
            {
                "identifier": namer.db_identifier("mysql"),
                "engine": RDS_DEFAULTS["engine"],
                "engine_version": RDS_DEFAULTS["engine_version"],
                "instance_class": config.rds_instance_class,
                "allocated_storage": config.rds_allocated_storage,
                "db_subnet_group_name": self.ref(self.subnet_group),
                "security_group_ids": [security_group_id],
                "port": PORTS["mysql"],
                "username": RDS_DEFAULTS["master_username"],
                "manage_master_user_password": True,
                "multi_az": config.multi_az,
                "publicly_accessible": False,
                "storage_encrypted": True,
                "backup_retention_period": 7 if config.is_production else 1,
                "deletion_protection": config.enable_deletion_protection,
                "skip_final_snapshot": True,
            },
            removal_policy=RemovalPolicy.DESTROY,
        )

    def get_outputs(self) -> RdsOutputs:
        """Get RDS output references."""
        return RdsOutputs(
            endpoint=self.get_att(self.instance, "endpoint"),
            port=self.get_att(self.instance, "port"),
            instance_id=self.ref(self.instance),
        )
