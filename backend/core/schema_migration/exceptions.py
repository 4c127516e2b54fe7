"""
Schema migration exceptions.

System role: Typed failures raised by the migration and its Data API client
"""


class SchemaMigrationError(Exception):
    """Raised when a migration statement fails."""

    pass


class InvalidEmbeddingDimensionError(SchemaMigrationError):
    """Raised when the requested embedding size cannot be indexed."""

    pass


class DatabaseResumingError(SchemaMigrationError):
    """Raised while an auto-paused Aurora Serverless cluster is resuming."""

    pass
