"""
Base configuration dataclass for environment settings.

Provides the read-only stack context passed explicitly into every component.
"""

from dataclasses import dataclass, field

from IAC.configs.constants import (
    CONTAINER_DEFAULTS,
    DEFAULT_CALLBACK_URLS,
    DEFAULT_CI_REPOSITORIES,
    DEFAULT_FOUNDATION_MODELS,
    DEFAULT_LOGOUT_URLS,
    MIN_AVAILABILITY_ZONES,
    PUBLIC_SUBNET_CIDRS,
)


@dataclass(frozen=True)
class EnvironmentConfig:
    """
    Environment-specific configuration for infrastructure deployment.

    Attributes:
        environment: Deployment environment (dev, staging, prod)
        account_id: AWS account the stack deploys into
        region: AWS region the stack deploys into
        availability_zones: AZ names, one public subnet per entry
        enable_vpc_endpoints: Create Secrets Manager / RDS Data endpoints
        desired_count: ECS service task count
        container_cpu: Fargate task CPU units
        container_memory: Fargate task memory in MiB
        lambda_package_dir: Directory holding the packaged migration Lambda
        ci_repositories: GitHub "owner/repo" names trusted by the CI role
        callback_urls: Cognito OAuth callback URLs
        logout_urls: Cognito OAuth logout URLs
        foundation_models: Bedrock model IDs the agent role may invoke
    """
    environment: str
    account_id: str
    region: str
    availability_zones: tuple[str, ...]
    enable_vpc_endpoints: bool = True
    desired_count: int = CONTAINER_DEFAULTS["desired_count"]
    container_cpu: int = CONTAINER_DEFAULTS["cpu"]
    container_memory: int = CONTAINER_DEFAULTS["memory_mb"]
    lambda_package_dir: str = "build/schema_lambda"
    ci_repositories: tuple[str, ...] = field(default=DEFAULT_CI_REPOSITORIES)
    callback_urls: tuple[str, ...] = field(default=DEFAULT_CALLBACK_URLS)
    logout_urls: tuple[str, ...] = field(default=DEFAULT_LOGOUT_URLS)
    foundation_models: tuple[str, ...] = field(default=DEFAULT_FOUNDATION_MODELS)

    def __post_init__(self) -> None:
        zone_count = len(self.availability_zones)
        if zone_count < MIN_AVAILABILITY_ZONES:
            raise ValueError(
                f"At least {MIN_AVAILABILITY_ZONES} availability zones are required, got {zone_count}"
            )
        if zone_count > len(PUBLIC_SUBNET_CIDRS):
            raise ValueError(
                f"At most {len(PUBLIC_SUBNET_CIDRS)} availability zones are supported, got {zone_count}"
            )

    @property
    def is_production(self) -> bool:
        """Check if this is a production environment."""
        return self.environment == "prod"

    def arn(self, service: str, resource: str, region: bool = True) -> str:
        """
        Build an ARN in this stack's account.

        Args:
            service: AWS service namespace (e.g. 'ssm')
            resource: Resource part of the ARN (e.g. 'parameter/code-refactor/*')
            region: Include the region segment (False for global services)

        Returns:
            Fully qualified ARN string
        """
        region_segment = self.region if region else ""
        return f"arn:aws:{service}:{region_segment}:{self.account_id}:{resource}"
