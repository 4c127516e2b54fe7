"""
Infrastructure constants for Code Refactor.

Contains CIDR blocks, port numbers, capacity bounds, policy constants,
and the fixed naming prefixes shared by every component.
"""

from typing import Final

PROJECT_NAME: Final[str] = "code-refactor"

# VPC Configuration
VPC_CIDR: Final[str] = "10.0.0.0/16"

# One public /24 per availability zone, indexed by AZ position
PUBLIC_SUBNET_CIDRS: Final[tuple[str, ...]] = (
    "10.0.0.0/24",
    "10.0.1.0/24",
    "10.0.2.0/24",
)

MIN_AVAILABILITY_ZONES: Final[int] = 2

# Port configurations
PORTS: Final[dict[str, int]] = {
    "http": 80,
    "https": 443,
    "container": 8080,
    "postgres": 5432,
}

# Aurora PostgreSQL Serverless v2
DB_ENGINE: Final[str] = "aurora-postgresql"
DB_ENGINE_VERSION: Final[str] = "15.12"
DB_NAME: Final[str] = "coderefactor"
DB_MASTER_USERNAME: Final[str] = "postgres"
DB_MIN_CAPACITY: Final[float] = 0.5
DB_MAX_CAPACITY: Final[float] = 4.0

# Credential generation policy
DB_PASSWORD_LENGTH: Final[int] = 32
DB_PASSWORD_EXCLUDED_CHARACTERS: Final[str] = '"@/\\'

# Data API actions granted to the migration function and the knowledge base
RDS_DATA_ACTIONS: Final[tuple[str, ...]] = (
    "rds-data:ExecuteStatement",
    "rds-data:BatchExecuteStatement",
    "rds-data:BeginTransaction",
    "rds-data:CommitTransaction",
    "rds-data:RollbackTransaction",
)

# Schema migration Lambda
SCHEMA_LAMBDA_DEFAULTS: Final[dict[str, int]] = {
    "memory_mb": 256,
    "timeout_seconds": 60,
    "reserved_concurrency": 1,
    "embedding_dimensions": 1536,
}
SCHEMA_LAMBDA_PYTHON_VERSION: Final[str] = "3.12"
SCHEMA_LAMBDA_RUNTIME: Final[str] = f"python{SCHEMA_LAMBDA_PYTHON_VERSION}"
SCHEMA_LAMBDA_ARCHITECTURE: Final[str] = "x86_64"
# pip wheel tag of the Lambda runtime, independent of the build host
SCHEMA_LAMBDA_PIP_PLATFORM: Final[str] = f"manylinux2014_{SCHEMA_LAMBDA_ARCHITECTURE}"
SCHEMA_LAMBDA_HANDLER: Final[str] = "backend.core.schema_migration.lambda_handler.handler"

# Cognito policy
PASSWORD_MIN_LENGTH: Final[int] = 8
ID_TOKEN_VALIDITY_HOURS: Final[int] = 24
ACCESS_TOKEN_VALIDITY_HOURS: Final[int] = 24
REFRESH_TOKEN_VALIDITY_DAYS: Final[int] = 30
OAUTH_SCOPES: Final[tuple[str, ...]] = ("email", "openid", "profile")

DEFAULT_CALLBACK_URLS: Final[tuple[str, ...]] = (
    "https://localhost:3000/callback",
    "https://example.com/callback",
)
DEFAULT_LOGOUT_URLS: Final[tuple[str, ...]] = (
    "https://localhost:3000/logout",
    "https://example.com/logout",
)

# Container workload
CONTAINER_DEFAULTS: Final[dict[str, int]] = {
    "cpu": 512,
    "memory_mb": 1024,
    "desired_count": 1,
    "log_retention_days": 7,
}
CONTAINER_NAME: Final[str] = "code-refactor-api"
CONTAINER_LOG_GROUP: Final[str] = "/ecs/code-refactor"
CONTAINER_LOG_STREAM_PREFIX: Final[str] = "refactor"
ECR_REPOSITORY_NAME: Final[str] = "refactor-ecr-repo"
ECR_KEEP_IMAGES: Final[int] = 10

HEALTH_CHECK_PATH: Final[str] = "/health"

# Routes reachable without a bearer token. Both the API routing table and the
# authorizer exemptions are generated from this tuple.
PUBLIC_ROUTES: Final[tuple[tuple[str, str], ...]] = (
    ("GET", HEALTH_CHECK_PATH),
    ("GET", "/swagger"),
    ("GET", "/auth"),
)
PROXY_ROUTE_KEY: Final[str] = "ANY /{proxy+}"
# {proxy+} needs at least one path segment, so "/" gets its own guarded route
ROOT_ROUTE_KEY: Final[str] = "ANY /"
GUARDED_ROUTE_KEYS: Final[tuple[str, ...]] = (ROOT_ROUTE_KEY, PROXY_ROUTE_KEY)

CORS_ALLOW_METHODS: Final[tuple[str, ...]] = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
CORS_ALLOW_HEADERS: Final[tuple[str, ...]] = ("Content-Type", "Authorization")

# Frontend distribution
SPA_ERROR_CACHING_TTL_SECONDS: Final[int] = 300
CLOUDFRONT_PRICE_CLASS: Final[str] = "PriceClass_100"

# Bedrock
DEFAULT_FOUNDATION_MODELS: Final[tuple[str, ...]] = (
    "anthropic.claude-3-5-sonnet-20240620-v1:0",
    "amazon.titan-embed-text-v1",
)

# GitHub Actions OIDC
GITHUB_OIDC_HOST: Final[str] = "token.actions.githubusercontent.com"
CI_ROLE_NAME: Final[str] = "CodeRefactor-GitHubActions-Role"
DEFAULT_CI_REPOSITORIES: Final[tuple[str, ...]] = (
    "kazemisoroush/code-refactoring-tool",
    "kazemisoroush/code-refactoring-ui",
)

# Configuration store layout
CONFIG_PREFIX: Final[str] = f"/{PROJECT_NAME}"
CONFIG_CONSUMERS: Final[tuple[str, ...]] = ("backend", "frontend", "deployment")

# Default tags applied to all resources
DEFAULT_TAGS: Final[dict[str, str]] = {
    "project": "CodeRefactoring",
    "ManagedBy": "pulumi",
}
