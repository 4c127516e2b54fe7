"""
AWS boundary modules.

Exports: RdsDataClient
"""

from .rds_data_client import RdsDataClient

__all__ = ["RdsDataClient"]
