"""
Observability module.

Provides logging configuration shared by the Lambda handler and the scripts.
"""

from backend.observability.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
