"""
Configuration publishing components.

Components:
- ParameterStoreComponent: Writes records to SSM Parameter Store and Secrets Manager
"""

from IAC.components.configuration.parameter_store import (
    ConfigurationOutputs,
    ConfigurationRecord,
    ParameterStoreComponent,
    partition_records,
)
from IAC.components.configuration.records import build_configuration_records

__all__ = [
    "ConfigurationOutputs",
    "ConfigurationRecord",
    "ParameterStoreComponent",
    "partition_records",
    "build_configuration_records",
]
