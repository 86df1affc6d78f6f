"""
Configuration module for the TechHealth stack.

Provides type-safe configuration loading from STACK_* environment variables.
"""

from IAC.configs.base import EnvironmentConfig
from IAC.configs.environment import StackSettings, get_config
from IAC.configs.constants import (
    VPC_CIDR,
    SUBNET_CIDRS,
    DEFAULT_TAGS,
    INSTANCE_TYPES,
)

__all__ = [
    "EnvironmentConfig",
    "StackSettings",
    "get_config",
    "VPC_CIDR",
    "SUBNET_CIDRS",
    "DEFAULT_TAGS",
    "INSTANCE_TYPES",
]
