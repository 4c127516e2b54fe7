"""
pgvector schema for the Bedrock knowledge base.

Bedrock's Aurora vector store expects a table with a UUID primary key, an
embedding column, a text chunk column and JSON metadata, plus an HNSW
cosine index on the embedding. All statements are idempotent.
"""

from typing import List

SCHEMA_NAME = "bedrock_integration"
TABLE_NAME = "bedrock_kb"
QUALIFIED_TABLE = f"{SCHEMA_NAME}.{TABLE_NAME}"


def schema_statements(embedding_dimensions: int) -> List[str]:
    """
    Build the ordered migration statements.

    Args:
        embedding_dimensions: Size of the vector column

    Returns:
        SQL statements in execution order
    """
    return [
        "CREATE EXTENSION IF NOT EXISTS vector",
        f"CREATE SCHEMA IF NOT EXISTS {SCHEMA_NAME}",
        (
            f"CREATE TABLE IF NOT EXISTS {QUALIFIED_TABLE} ("
            "id uuid PRIMARY KEY, "
            f"embedding vector({embedding_dimensions}), "
            "chunks text, "
            "metadata json, "
            "custom_metadata jsonb)"
        ),
        (
            f"CREATE INDEX IF NOT EXISTS {TABLE_NAME}_embedding_idx ON {QUALIFIED_TABLE} "
            "USING hnsw (embedding vector_cosine_ops)"
        ),
        (
            f"CREATE INDEX IF NOT EXISTS {TABLE_NAME}_chunks_idx ON {QUALIFIED_TABLE} "
            "USING gin (to_tsvector('simple', chunks))"
        ),
        (
            f"CREATE INDEX IF NOT EXISTS {TABLE_NAME}_custom_metadata_idx ON {QUALIFIED_TABLE} "
            "USING gin (custom_metadata)"
        ),
    ]
