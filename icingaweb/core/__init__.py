"""
Core utilities and configuration for icingaweb.

This package provides core functionality such as logging configuration.
"""

from icingaweb.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
