"""
Stack components for the TechHealth infrastructure.

Each submodule provides component classes that declare related resources:
- networking: VPC, subnets, route tables, security groups
- compute: EC2 instance
- storage: RDS MySQL
- security: IAM role and instance profile
"""
