"""
Environment configuration loader.

Loads and validates configuration from Pulumi stack config files and
resolves the account, region and availability zones once, up front.
"""

import pulumi
import pulumi_aws as aws

from IAC.configs.base import EnvironmentConfig
from IAC.configs.constants import (
    CONTAINER_DEFAULTS,
    DEFAULT_CALLBACK_URLS,
    DEFAULT_CI_REPOSITORIES,
    DEFAULT_FOUNDATION_MODELS,
    DEFAULT_LOGOUT_URLS,
    MIN_AVAILABILITY_ZONES,
)


def _get_int(config: pulumi.Config, key: str, default: int) -> int:
    # An explicit 0 (e.g. desired_count before the first image push) is kept
    value = config.get_int(key)
    return default if value is None else value


def _get_tuple(config: pulumi.Config, key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = config.get_object(key)
    if value is None:
        return default
    return tuple(str(item) for item in value)


def get_config() -> EnvironmentConfig:
    """
    Load environment configuration from Pulumi stack config.

    Returns:
        EnvironmentConfig: Validated configuration object

    Raises:
        pulumi.ConfigMissingError: If aws:region is not set
        ValueError: If fewer than two availability zones are requested
    """
    config = pulumi.Config()
    region = pulumi.Config("aws").require("region")

    az_count = _get_int(config, "az_count", MIN_AVAILABILITY_ZONES)
    available = aws.get_availability_zones(state="available")
    identity = aws.get_caller_identity()

    return EnvironmentConfig(
        environment=config.get("environment") or pulumi.get_stack(),
        account_id=identity.account_id,
        region=region,
        availability_zones=tuple(available.names[:az_count]),
        enable_vpc_endpoints=config.get_bool("enable_vpc_endpoints") is not False,
        desired_count=_get_int(config, "desired_count", CONTAINER_DEFAULTS["desired_count"]),
        container_cpu=_get_int(config, "container_cpu", CONTAINER_DEFAULTS["cpu"]),
        container_memory=_get_int(config, "container_memory", CONTAINER_DEFAULTS["memory_mb"]),
        lambda_package_dir=config.get("lambda_package_dir") or "build/schema_lambda",
        ci_repositories=_get_tuple(config, "ci_repositories", DEFAULT_CI_REPOSITORIES),
        callback_urls=_get_tuple(config, "callback_urls", DEFAULT_CALLBACK_URLS),
        logout_urls=_get_tuple(config, "logout_urls", DEFAULT_LOGOUT_URLS),
        foundation_models=_get_tuple(config, "foundation_models", DEFAULT_FOUNDATION_MODELS),
    )
