"""
Pytest fixtures for infrastructure tests.

Runs the Pulumi program against in-memory mocks. Every registered resource
is recorded (type, logical name, inputs, registration order) so tests can
assert on the emitted graph without touching AWS.
"""

from dataclasses import dataclass
from pathlib import Path

import pulumi
import pytest

TEST_ACCOUNT_ID = "123456789012"
TEST_REGION = "us-east-1"
TEST_ZONES = ("us-east-1a", "us-east-1b")

# Pulumi's wire marker for a secret value: {SECRET_SIG_KEY: SECRET_SIG, "value": ...}
SECRET_SIG_KEY = "4dabf18193072939515e22adb298388d"
SECRET_SIG = "1b47061264138c4ac30d75fd1eb44270"


def unwrap_secrets(value):
    """Replace every serialized secret in value with its plain content."""
    if isinstance(value, dict):
        if value.get(SECRET_SIG_KEY) == SECRET_SIG:
            return unwrap_secrets(value.get("value"))
        return {key: unwrap_secrets(item) for key, item in value.items()}
    if isinstance(value, list):
        return [unwrap_secrets(item) for item in value]
    return value


@dataclass
class RecordedResource:
    """One RegisterResource call seen by the mocks."""
    typ: str
    name: str
    resource_id: str
    inputs: dict
    order: int


class RecordingMocks(pulumi.runtime.Mocks):
    """Pulumi mocks that echo inputs back as state and record every resource."""

    def __init__(self) -> None:
        self.resources: list[RecordedResource] = []
        self.calls: list[str] = []

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        resource_id = f"{args.name}_id"
        inputs = unwrap_secrets(dict(args.inputs))
        self.resources.append(RecordedResource(
            typ=args.typ,
            name=args.name,
            resource_id=resource_id,
            inputs=inputs,
            order=len(self.resources),
        ))

        state = dict(inputs)
        state.setdefault("arn", f"arn:aws:mock:{TEST_REGION}:{TEST_ACCOUNT_ID}:{args.name}")
        state.setdefault("name", args.name)
        state.setdefault("bucket", args.name)
        state.setdefault("dnsName", f"{args.name}.elb.amazonaws.com")
        state.setdefault("apiEndpoint", f"https://{args.name}.execute-api.{TEST_REGION}.amazonaws.com")
        state.setdefault("repositoryUrl", f"{TEST_ACCOUNT_ID}.dkr.ecr.{TEST_REGION}.amazonaws.com/{args.name}")
        state.setdefault("domainName", f"{args.name}.cloudfront.net")
        state.setdefault("endpoint", f"{args.name}.cluster.{TEST_REGION}.rds.amazonaws.com")
        state.setdefault("iamArn", f"arn:aws:iam::cloudfront:user/{args.name}")
        state.setdefault("cloudfrontAccessIdentityPath", f"origin-access-identity/cloudfront/{resource_id}")
        state.setdefault("bucketRegionalDomainName", f"{args.name}.s3.{TEST_REGION}.amazonaws.com")
        return resource_id, state

    def call(self, args: pulumi.runtime.MockCallArgs):
        self.calls.append(args.token)
        if args.token == "aws:secretsmanager/getRandomPassword:getRandomPassword":
            return {"id": "random", "randomPassword": "p" * 32}
        return {}

    def of_type(self, fragment: str) -> list[RecordedResource]:
        """Resources whose type token contains fragment."""
        return [resource for resource in self.resources if fragment in resource.typ]

    def by_name(self, name: str) -> RecordedResource:
        matches = [resource for resource in self.resources if resource.name == name]
        assert matches, f"No resource named {name}"
        return matches[0]


@pytest.fixture
def test_config():
    """Stack context used by every graph test."""
    from IAC.configs.base import EnvironmentConfig

    return EnvironmentConfig(
        environment="dev",
        account_id=TEST_ACCOUNT_ID,
        region=TEST_REGION,
        availability_zones=TEST_ZONES,
    )


@pytest.fixture
def run_stack(test_config):
    """
    Build the whole stack under fresh mocks.

    Returns a callable taking an optional EnvironmentConfig and returning
    (mocks, StackResources). Each call starts a new mocked deployment.
    """
    def _run(config=None):
        mocks = RecordingMocks()
        pulumi.runtime.set_mocks(mocks, project="code-refactor", stack="dev", preview=False)

        from IAC.stack import build_stack

        result = {}

        @pulumi.runtime.test
        def _build():
            stack = build_stack(
                config or test_config,
                lambda_code=pulumi.AssetArchive({
                    "handler.py": pulumi.StringAsset("def handler(event, context):\n    return {}\n"),
                }),
            )
            result["stack"] = stack
            return pulumi.Output.all(*stack.outputs.values())

        _build()
        return mocks, result["stack"]

    return _run


@pytest.fixture
def iac_project_root():
    """Return the IAC project root directory."""
    return Path(__file__).parent.parent.parent / "IAC"


@pytest.fixture
def python_files_in_iac(iac_project_root):
    """Return all Python files in IAC directory."""
    return [f for f in iac_project_root.rglob("*.py") if "__pycache__" not in str(f)]
