"""
Shared module - Cross-cutting concerns / Shared Layer

This module provides shared utilities, constants, and enums that are used
across multiple layers of the application: environment names, log levels,
storage backends and the structured logging setup.

It must not depend on Infrastructure or Frameworks.
"""

from .consts import EnumEnvironment, EnumLogLevel, EnumStorageBackend
from .logging import configure_logging, get_logger, update_logging_from_settings

__all__ = [
    "EnumEnvironment",
    "EnumLogLevel",
    "EnumStorageBackend",
    "configure_logging",
    "get_logger",
    "update_logging_from_settings",
]
