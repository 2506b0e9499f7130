"""
============================================
Core infrastructure package for the CRUD layer.
============================================

This package provides configuration management, logging infrastructure and
the exception hierarchy used throughout the project.

Modules:
    config: Connection descriptors loaded from environment variables
    logger: Centralized logging configuration and utilities
    exceptions: Typed errors raised by every other package

Example:
    >>> from core.config import config
    >>> from core.logger import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info(f"Active backend: {config.default_backend}")
"""

__version__ = "0.1.0"
__all__ = [
    'get_logger', 'setup_logging', 'config', 'Config',
    'ConnectionConfig', 'DatabaseConfig',
    'DatabaseError', 'ConfigurationError', 'DatabaseConnectionError',
    'DriverError', 'StatementInterruptedError', 'MalformedInputError'
]

from core.config import Config, ConnectionConfig, DatabaseConfig, config
from core.exceptions import (
    ConfigurationError,
    DatabaseConnectionError,
    DatabaseError,
    DriverError,
    MalformedInputError,
    StatementInterruptedError,
)
from core.logger import get_logger, setup_logging
