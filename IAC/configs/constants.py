"""
Infrastructure constants for the TechHealth migration stack.

Contains CIDR blocks, instance types, ports and default configurations.
"""

from typing import Final

# VPC Configuration
VPC_CIDR: Final[str] = "10.0.0.0/16"

# One /24 per subnet tier and AZ, public tier first
SUBNET_CIDRS: Final[dict[str, str]] = {
    "public_a": "10.0.0.0/24",
    "public_b": "10.0.1.0/24",
    "private_a": "10.0.2.0/24",   # RDS MySQL (AZ-a)
    "private_b": "10.0.3.0/24",   # RDS MySQL (AZ-b)
}

# Availability zones (us-east-1)
AVAILABILITY_ZONES: Final[list[str]] = [
    "us-east-1a",
    "us-east-1b",
]

# EC2 Instance types by environment
INSTANCE_TYPES: Final[dict[str, str]] = {
    "dev": "t3.micro",
    "staging": "t3.micro",
    "prod": "t3.small",
}

# RDS Instance classes by environment
RDS_INSTANCE_CLASSES: Final[dict[str, str]] = {
    "dev": "db.t3.micro",
    "staging": "db.t3.micro",
    "prod": "db.t3.small",
}

# RDS MySQL configuration
RDS_DEFAULTS: Final[dict[str, str | int]] = {
    "engine": "mysql",
    "engine_version": "8.0",
    "allocated_storage_gb": 20,
    "master_username": "admin",
}

# Latest Amazon Linux 2 AMI, resolved by the provider at create time
AMAZON_LINUX_2_AMI: Final[str] = (
    "resolve:ssm:/aws/service/ami-amazon-linux-latest/amzn2-ami-hvm-x86_64-gp2"
)

# AWS managed policies
SSM_MANAGED_INSTANCE_CORE_ARN: Final[str] = (
    "arn:aws:iam::aws:policy/AmazonSSMManagedInstanceCore"
)

# Default tags applied to all resources
DEFAULT_TAGS: Final[dict[str, str]] = {
    "Project": "techhealth",
    "ManagedBy": "reconciler",
}

# Port configurations
PORTS: Final[dict[str, int]] = {
    "ssh": 22,
    "http": 80,
    "mysql": 3306,
}

ANY_IPV4: Final[str] = "0.0.0.0/0"
