"""
Resource naming conventions for consistent AWS resource names.

Physical names follow {project}-{resource}; globally unique names append the
account and region. Configuration keys follow /{project}/{consumer}/{key}.
Every name is a pure function of its inputs so that rebuilding the stack
from scratch yields the same names.
"""

from dataclasses import dataclass


@dataclass
class ResourceNamer:
    """
    Generates consistent resource names for AWS resources.

    Attributes:
        project: Project identifier
        environment: Deployment environment (dev, staging, prod)
    """
    project: str
    environment: str

    def name(self, resource: str) -> str:
        """
        Generate a resource name.

        Args:
            resource: Resource identifier (e.g., 'cluster', 'user-pool')

        Returns:
            Formatted resource name, or the bare project when resource is empty
        """
        if not resource:
            return self.project
        return f"{self.project}-{resource}"

    def bucket_name(self, suffix: str, account_id: str, region: str) -> str:
        """
        Generate an S3 bucket name (must be globally unique).

        Args:
            suffix: Bucket suffix (e.g., 'bucket', 'frontend')
            account_id: AWS account ID
            region: AWS region

        Returns:
            Globally unique bucket name
        """
        return f"{self.project}-{suffix}-{account_id}-{region}"

    def domain_prefix(self, account_id: str) -> str:
        """Cognito hosted-UI domain prefix, unique per account."""
        return f"{self.project}-{account_id}"

    def parameter_name(self, consumer: str, key: str) -> str:
        """
        Generate an SSM parameter name.

        Args:
            consumer: Reading side ('backend', 'frontend', 'deployment')
            key: Parameter key (e.g., 'api-gateway-url')

        Returns:
            Hierarchical parameter name
        """
        return f"/{self.project}/{consumer}/{key}"

    def secret_name(self, consumer: str) -> str:
        """Secrets Manager name holding a consumer's JSON secret object."""
        return f"/{self.project}/{consumer}/secrets"

    def parameter_resource_name(self, parameter_name: str) -> str:
        """
        Derive the Pulumi logical name for a parameter from its full key.

        '/code-refactor/backend/api-gateway-url' -> 'param-backend-api-gateway-url'
        """
        relative = parameter_name.removeprefix(f"/{self.project}/")
        return "param-" + relative.replace("/", "-")
