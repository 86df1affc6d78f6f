"""
Networking components for VPC infrastructure.

Components:
- VpcComponent: VPC with subnets, internet gateway, route tables
- SecurityGroupsComponent: Security groups for EC2 and RDS
"""

from IAC.components.networking.vpc import VpcComponent, VpcOutputs
from IAC.components.networking.security_groups import SecurityGroupsComponent, SecurityGroupOutputs

__all__ = [
    "VpcComponent",
    "VpcOutputs",
    "SecurityGroupsComponent",
    "SecurityGroupOutputs",
]
