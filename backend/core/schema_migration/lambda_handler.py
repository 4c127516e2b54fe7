"""
Lambda handler that ensures the pgvector schema exists.

Creates the vector extension, the bedrock_integration schema, the
bedrock_kb table and its indexes through the RDS Data API. Safe to invoke
repeatedly; every statement is IF NOT EXISTS.

Environment variables (injected by the infrastructure):
- DB_SECRET_ARN: Master credentials secret
- DB_CLUSTER_ARN: Aurora cluster ARN
- DB_NAME: Database name
- EMBEDDING_DIMENSIONS: Vector size (default 1536)
- AUTO_MIGRATE_SCHEMA: Run without an explicit {"force": true} event
- LOG_LEVEL: Logging level

Dependencies: pydantic_settings, boto3, tenacity
System role: Invoked on demand by the API container before knowledge-base ingestion
"""

import json
import logging
from typing import Any, Dict, Optional

from botocore.exceptions import ClientError
from pydantic import ValidationError

from backend.boundary.aws.rds_data_client import RdsDataClient
from backend.configs.schema_migration import MAX_INDEXED_DIMENSIONS, SchemaMigrationSettings
from backend.core.schema_migration.exceptions import (
    InvalidEmbeddingDimensionError,
    SchemaMigrationError,
)
from backend.core.schema_migration.statements import QUALIFIED_TABLE, schema_statements
from backend.observability.logger import configure_logging

logger = logging.getLogger(__name__)


def _response(status_code: int, **body: Any) -> Dict[str, Any]:
    return {"statusCode": status_code, "body": json.dumps(body)}


def _requested_dimensions(event: Dict[str, Any], default: int) -> int:
    """Event may override the configured embedding size."""
    value = event.get("embedding_dimensions", default)
    try:
        dimensions = int(value)
    except (TypeError, ValueError) as e:
        raise InvalidEmbeddingDimensionError(f"embedding_dimensions is not an integer: {value!r}") from e
    if not 1 <= dimensions <= MAX_INDEXED_DIMENSIONS:
        raise InvalidEmbeddingDimensionError(
            f"embedding_dimensions must be between 1 and {MAX_INDEXED_DIMENSIONS}, got {dimensions}"
        )
    return dimensions


def ensure_schema(client: RdsDataClient, embedding_dimensions: int) -> int:
    """
    Run every migration statement in order.

    Args:
        client: Data API client bound to the cluster
        embedding_dimensions: Size of the vector column

    Returns:
        Number of statements executed
    """
    statements = schema_statements(embedding_dimensions)
    for index, sql in enumerate(statements, start=1):
        logger.info(
            "%s:ensure_schema - Executing statement %d/%d",
            __name__,
            index,
            len(statements),
        )
        client.execute(sql)
    return len(statements)


def handler(
    event: Optional[Dict[str, Any]],
    context: Any,
    settings: Optional[SchemaMigrationSettings] = None,
    client: Optional[RdsDataClient] = None,
) -> Dict[str, Any]:
    """
    Lambda entry point.

    Args:
        event: Invocation payload; {"force": true} runs even when
            AUTO_MIGRATE_SCHEMA is false, "embedding_dimensions" overrides
            the configured size
        context: Lambda context object
        settings: Pre-built settings (tests)
        client: Pre-built Data API client (tests)

    Returns:
        Dict with statusCode and a JSON body carrying status
    """
    event = event or {}

    try:
        settings = settings or SchemaMigrationSettings()
    except ValidationError as e:
        logger.error("%s:handler - Invalid configuration: %s", __name__, e)
        return _response(500, status="error", error=str(e))

    configure_logging(settings.log_level)

    if not settings.auto_migrate_schema and not event.get("force", False):
        logger.info("%s:handler - Auto migration disabled, skipping", __name__)
        return _response(200, status="skipped", table=QUALIFIED_TABLE)

    try:
        dimensions = _requested_dimensions(event, settings.embedding_dimensions)
        client = client or RdsDataClient(
            cluster_arn=settings.db_cluster_arn,
            secret_arn=settings.db_secret_arn,
            database=settings.db_name,
            region=settings.aws_region,
        )
        executed = ensure_schema(client, dimensions)
    except (SchemaMigrationError, ClientError) as e:
        logger.exception("%s:handler - Schema migration failed", __name__)
        return _response(500, status="error", error=str(e))

    logger.info(
        "%s:handler - Schema ensured",
        __name__,
        extra={"table": QUALIFIED_TABLE, "embedding_dimensions": dimensions},
    )
    return _response(
        200,
        status="ok",
        table=QUALIFIED_TABLE,
        embedding_dimensions=dimensions,
        statements_executed=executed,
    )
