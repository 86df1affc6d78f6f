"""
Resource naming conventions for consistent logical ids and AWS names.

Follows pattern: {project}-{environment}-{resource}
"""

from dataclasses import dataclass


@dataclass
class ResourceNamer:
    """
    Generates consistent resource names.

    Attributes:
        project: Project identifier
        environment: Deployment environment (dev, staging, prod)
    """
    project: str
    environment: str

    @property
    def base(self) -> str:
        """Common prefix shared by every name in the stack."""
        return f"{self.project}-{self.environment}"

    def name(self, resource: str) -> str:
        """
        Generate a resource name.

        Args:
            resource: Resource identifier (e.g., 'vpc', 'ec2-sg')

        Returns:
            Formatted resource name
        """
        return f"{self.base}-{resource}"

    def db_identifier(self, resource: str) -> str:
        """
        Generate an RDS instance identifier (lowercase, hyphens, max 63 chars).

        Args:
            resource: Database identifier suffix

        Returns:
            Identifier accepted by RDS
        """
        return self.name(resource).lower().replace("_", "-")[:63]
