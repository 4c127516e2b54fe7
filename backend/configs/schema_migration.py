"""
Schema migration Lambda settings.

Maps the environment variables the infrastructure injects into the
migration function (DB_SECRET_ARN, DB_CLUSTER_ARN, DB_NAME, ...).

Dependencies: pydantic_settings
System role: Configuration for backend.core.schema_migration
"""

from pydantic import Field, field_validator

from backend.configs.base import BaseSettings

# pgvector HNSW indexes support at most 2000 dimensions
MAX_INDEXED_DIMENSIONS = 2000


class SchemaMigrationSettings(BaseSettings):
    """Settings for the pgvector schema migration."""

    db_secret_arn: str = Field(description="Secrets Manager ARN of the master credentials")
    db_cluster_arn: str = Field(description="Aurora cluster ARN (Data API resource)")
    db_name: str = Field(default="coderefactor", description="Database name")
    db_host: str | None = Field(default=None, description="Cluster writer endpoint")
    db_port: int = Field(default=5432, description="PostgreSQL port")
    embedding_dimensions: int = Field(
        default=1536,
        description="Embedding vector size (Titan Embeddings v1 = 1536)",
    )
    auto_migrate_schema: bool = Field(
        default=True,
        description="Run the migration on invocation without an explicit force flag",
    )

    @field_validator("embedding_dimensions")
    @classmethod
    def _check_dimensions(cls, value: int) -> int:
        if not 1 <= value <= MAX_INDEXED_DIMENSIONS:
            raise ValueError(
                f"embedding_dimensions must be between 1 and {MAX_INDEXED_DIMENSIONS}, got {value}"
            )
        return value
