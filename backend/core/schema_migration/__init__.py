"""
Schema migration for the Bedrock knowledge-base vector store.

Entry point: backend.core.schema_migration.lambda_handler.handler
"""

from backend.core.schema_migration.exceptions import (
    DatabaseResumingError,
    InvalidEmbeddingDimensionError,
    SchemaMigrationError,
)
from backend.core.schema_migration.statements import QUALIFIED_TABLE, schema_statements

__all__ = [
    "DatabaseResumingError",
    "InvalidEmbeddingDimensionError",
    "SchemaMigrationError",
    "QUALIFIED_TABLE",
    "schema_statements",
]
