"""
Configuration management module.

Provides type-safe configuration using Pydantic Settings.
"""

from backend.configs.base import BaseSettings
from backend.configs.schema_migration import SchemaMigrationSettings

__all__ = ["BaseSettings", "SchemaMigrationSettings"]
