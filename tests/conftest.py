"""
Shared test fixtures and configuration for entire test suite.

Provides: AWS environment isolation for boto3 and settings classes
Dependencies: pytest
System role: Test infrastructure and fixture management
"""

import pytest

MIGRATION_ENV_VARS = (
    "DB_SECRET_ARN",
    "DB_CLUSTER_ARN",
    "DB_NAME",
    "DB_HOST",
    "EMBEDDING_DIMENSIONS",
    "AUTO_MIGRATE_SCHEMA",
)


@pytest.fixture(autouse=True)
def isolated_aws_environment(monkeypatch):
    """
    Keep tests away from real AWS credentials and stray settings.

    boto3 clients built during a test get dummy credentials and a fixed
    region; migration settings start from a clean environment.
    """
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    for name in MIGRATION_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
