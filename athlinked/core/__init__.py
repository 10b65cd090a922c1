"""
Core utilities and configuration for AthLinked.

This package provides core functionality including logging configuration,
database setup, domain exceptions and other shared utilities.
"""

from athlinked.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
