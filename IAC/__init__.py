"""
Declarative infrastructure for the TechHealth migration.

This package defines the AWS stack as reconciler resource definitions:
- VPC with public and private isolated subnets across two AZs
- Security groups for the EC2 instance and the RDS database
- IAM role with SSM access and its instance profile
- EC2 t3.micro running Amazon Linux 2 in a public subnet
- RDS MySQL 8.0 in the private subnets
"""
