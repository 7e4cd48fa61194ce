"""
Core utilities and configuration for Herit.

This package provides core functionality including logging configuration,
database setup, domain errors and shared models.
"""

from herit.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
