"""
Security components for IAM.

Components:
- IamRolesComponent: EC2 role with SSM access and its instance profile
"""

from IAC.components.security.iam_roles import IamRolesComponent, IamRoleOutputs

__all__ = [
    "IamRolesComponent",
    "IamRoleOutputs",
]
