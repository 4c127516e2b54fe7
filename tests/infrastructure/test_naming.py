"""
Tests for naming, tagging and stack context helpers.
"""

import json

import pytest


class TestResourceNamer:
    """ResourceNamer conventions."""

    @pytest.fixture
    def namer(self):
        from IAC.utils.naming import ResourceNamer

        return ResourceNamer(project="code-refactor", environment="dev")

    def test_resource_name(self, namer):
        """Names are {project}-{resource}; an empty resource yields the project."""
        assert namer.name("cluster") == "code-refactor-cluster"
        assert namer.name("") == "code-refactor"

    def test_bucket_name_is_account_and_region_scoped(self, namer):
        """Bucket names embed the account and region for global uniqueness."""
        assert namer.bucket_name("bucket", "123456789012", "us-east-1") == (
            "code-refactor-bucket-123456789012-us-east-1"
        )

    def test_domain_prefix(self, namer):
        """The Cognito domain prefix embeds the account ID."""
        assert namer.domain_prefix("123456789012") == "code-refactor-123456789012"

    def test_configuration_names(self, namer):
        """Parameters and secrets live under /code-refactor/{consumer}."""
        parameter = namer.parameter_name("backend", "api-gateway-url")

        assert parameter == "/code-refactor/backend/api-gateway-url"
        assert namer.secret_name("frontend") == "/code-refactor/frontend/secrets"
        assert namer.parameter_resource_name(parameter) == "param-backend-api-gateway-url"


class TestTags:
    """Tag factory."""

    def test_create_tags_includes_defaults(self):
        """Every tag set carries project, ManagedBy, Environment and Name."""
        from IAC.utils.tags import create_tags

        tags = create_tags("dev", "code-refactor-vpc", Tier="public")

        assert tags == {
            "project": "CodeRefactoring",
            "ManagedBy": "pulumi",
            "Environment": "dev",
            "Name": "code-refactor-vpc",
            "Tier": "public",
        }

    def test_merge_tags_later_wins(self):
        """Later dictionaries override earlier keys."""
        from IAC.utils.tags import merge_tags

        assert merge_tags({"a": "1", "b": "1"}, {"b": "2"}, {"c": "3"}) == {"a": "1", "b": "2", "c": "3"}

    def test_project_tag_filter(self):
        """The EC2 filter matches the project tag value."""
        from IAC.utils.tags import project_tag_filter

        assert project_tag_filter() == {"Name": "tag:project", "Values": ["CodeRefactoring"]}


class TestEnvironmentConfig:
    """Stack context validation and helpers."""

    def _config(self, **overrides):
        from IAC.configs.base import EnvironmentConfig

        values = {
            "environment": "dev",
            "account_id": "123456789012",
            "region": "us-east-1",
            "availability_zones": ("us-east-1a", "us-east-1b"),
        }
        values.update(overrides)
        return EnvironmentConfig(**values)

    def test_defaults(self):
        """Container sizing defaults to 512 CPU / 1024 MiB with one task."""
        config = self._config()

        assert config.container_cpu == 512
        assert config.container_memory == 1024
        assert config.desired_count == 1
        assert config.enable_vpc_endpoints is True
        assert not config.is_production

    def test_too_many_zones_rejected(self):
        """There are only three public subnet CIDRs."""
        with pytest.raises(ValueError, match="At most"):
            self._config(availability_zones=("a", "b", "c", "d"))

    def test_config_is_frozen(self):
        """The stack context is read-only once built."""
        from dataclasses import FrozenInstanceError

        config = self._config()
        with pytest.raises(FrozenInstanceError):
            config.region = "eu-west-1"

    def test_arn_builder(self):
        """ARNs are scoped to the stack account, optionally without a region."""
        config = self._config()

        assert config.arn("ssm", "parameter/code-refactor/*") == (
            "arn:aws:ssm:us-east-1:123456789012:parameter/code-refactor/*"
        )
        assert config.arn("iam", "role/x", region=False) == "arn:aws:iam::123456789012:role/x"

    def test_prod_flag(self):
        """Only the prod environment counts as production."""
        assert self._config(environment="prod").is_production
        assert not self._config(environment="staging").is_production


class StubConfig:
    """In-memory stand-in for pulumi.Config."""

    def __init__(self, values):
        self.values = values

    def get(self, key):
        return self.values.get(key)

    def get_int(self, key):
        return self.values.get(key)

    def get_bool(self, key):
        return self.values.get(key)

    def get_object(self, key):
        return self.values.get(key)

    def require(self, key):
        return self.values[key]


class TestGetConfig:
    """Loading EnvironmentConfig from stack config."""

    def _load(self, values):
        from types import SimpleNamespace
        from unittest.mock import patch

        from IAC.configs.environment import get_config

        def config_for(namespace=None):
            return StubConfig({"region": "us-east-1"} if namespace == "aws" else values)

        with patch("IAC.configs.environment.pulumi.Config", side_effect=config_for), \
                patch("IAC.configs.environment.pulumi.get_stack", return_value="dev"), \
                patch("IAC.configs.environment.aws.get_availability_zones",
                      return_value=SimpleNamespace(names=["us-east-1a", "us-east-1b", "us-east-1c"])), \
                patch("IAC.configs.environment.aws.get_caller_identity",
                      return_value=SimpleNamespace(account_id="123456789012")):
            return get_config()

    def test_unset_values_take_defaults(self):
        """Missing keys fall back to the container and zone defaults."""
        config = self._load({})

        assert config.environment == "dev"
        assert config.availability_zones == ("us-east-1a", "us-east-1b")
        assert config.desired_count == 1
        assert config.container_cpu == 512
        assert config.container_memory == 1024

    def test_explicit_zero_desired_count_is_kept(self):
        """A stack can scale the service to zero before the first image push."""
        config = self._load({"desired_count": 0})

        assert config.desired_count == 0

    def test_explicit_values_override_defaults(self):
        """Configured sizing and zone count are used as given."""
        config = self._load({"az_count": 3, "container_cpu": 1024, "container_memory": 2048})

        assert len(config.availability_zones) == 3
        assert config.container_cpu == 1024
        assert config.container_memory == 2048


class TestPolicies:
    """IAM policy helpers."""

    def test_assume_role_policy(self):
        """Trust policy names the service principal."""
        from IAC.utils.policies import assume_role_policy

        policy = json.loads(assume_role_policy("lambda.amazonaws.com"))

        assert policy["Statement"][0]["Principal"] == {"Service": "lambda.amazonaws.com"}
        assert policy["Statement"][0]["Action"] == "sts:AssumeRole"

    def test_github_trust_policy_scopes_repositories(self):
        """Only the listed repositories may assume the CI role."""
        from IAC.components.security.iam_roles import github_trust_policy

        policy = json.loads(github_trust_policy("123456789012", ("acme/refactor",)))
        condition = policy["Statement"][0]["Condition"]

        assert condition["StringLike"]["token.actions.githubusercontent.com:sub"] == ["repo:acme/refactor:*"]
        assert policy["Statement"][0]["Principal"]["Federated"] == (
            "arn:aws:iam::123456789012:oidc-provider/token.actions.githubusercontent.com"
        )
