"""
Compute components for EC2.

Components:
- Ec2InstanceComponent: EC2 instance for the application server
"""

from IAC.components.compute.ec2_instance import Ec2InstanceComponent, Ec2Outputs

__all__ = [
    "Ec2InstanceComponent",
    "Ec2Outputs",
]
