"""
Environment configuration loader.

Loads and validates stack configuration from STACK_* environment variables
(or a .env file).

Dependencies: pydantic_settings
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from IAC.configs.base import EnvironmentConfig
from IAC.configs.constants import INSTANCE_TYPES, RDS_DEFAULTS, RDS_INSTANCE_CLASSES


class StackSettings(BaseSettings):
    """Raw stack configuration as read from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STACK_",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(default="dev", description="Deployment environment")
    project: str = Field(default="techhealth", description="Project identifier")
    ec2_instance_type: str | None = Field(default=None, description="Overrides the per-environment default")
    rds_instance_class: str | None = Field(default=None, description="Overrides the per-environment default")
    rds_allocated_storage: int = Field(default=int(RDS_DEFAULTS["allocated_storage_gb"]), ge=20)
    enable_deletion_protection: bool = Field(default=False)
    multi_az: bool = Field(default=False)


def get_config(settings: StackSettings | None = None) -> EnvironmentConfig:
    """
    Load environment configuration.

    Args:
        settings: Pre-parsed settings (defaults to reading the environment)

    Returns:
        EnvironmentConfig: Validated configuration object

    Raises:
        pydantic.ValidationError: If a config value is invalid
    """
    settings = settings or StackSettings()

    return EnvironmentConfig(
        environment=settings.environment,
        project=settings.project,
        ec2_instance_type=settings.ec2_instance_type or INSTANCE_TYPES.get(settings.environment, "t3.micro"),
        rds_instance_class=settings.rds_instance_class
        or RDS_INSTANCE_CLASSES.get(settings.environment, "db.t3.micro"),
        rds_allocated_storage=settings.rds_allocated_storage,
        enable_deletion_protection=settings.enable_deletion_protection,
        multi_az=settings.multi_az,
    )
