"""
Base configuration dataclass for environment settings.

Provides type-safe configuration structure for a stack deployment.
"""

from dataclasses import dataclass, field

from IAC.configs.constants import AVAILABILITY_ZONES


@dataclass(frozen=True)
class EnvironmentConfig:
    """
    Environment-specific configuration for infrastructure deployment.

    Attributes:
        environment: Deployment environment (dev, staging, prod)
        project: Project identifier used in resource names
        ec2_instance_type: EC2 instance type for the application server
        rds_instance_class: RDS instance class for MySQL
        rds_allocated_storage: RDS storage in GB
        enable_deletion_protection: Enable deletion protection for databases
        multi_az: Enable multi-AZ deployment for RDS
        availability_zones: AZs the subnets are spread across
    """
    environment: str
    project: str = "techhealth"
    ec2_instance_type: str = "t3.micro"
    rds_instance_class: str = "db.t3.micro"
    rds_allocated_storage: int = 20
    enable_deletion_protection: bool = False
    multi_az: bool = False
    availability_zones: tuple[str, ...] = field(default=tuple(AVAILABILITY_ZONES))

    @property
    def is_production(self) -> bool:
        """Check if this is a production environment."""
        return self.environment == "prod"

    def get_tags(self) -> dict[str, str]:
        """Get environment-specific tags."""
        return {
            "Environment": self.environment,
        }
