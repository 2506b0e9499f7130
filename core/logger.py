"""
=================================================
Centralized logging configuration for the CRUD layer.
=================================================

Every module logs through `logging.getLogger(__name__)`. This module only
decides where those records go:

- Console output with ANSI colors and an emoji per level
- Optional UTF-8 log file
- Root level from the argument, else $LOG_LEVEL, else INFO
- SQL echo: the executor logs each statement at DEBUG on `crud.executor`;
  `sql_echo=True` (or $LOG_SQL=1) shows them without lowering the root level

Example:
    >>> from core.logger import get_logger, setup_logging
    >>>
    >>> setup_logging(log_level='WARNING', sql_echo=True, log_file='crud.log')
    >>> logger = get_logger(__name__)
    >>> logger.warning("Replica lagging, reading from primary")
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

from core.exceptions import ConfigurationError

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Logger that receives every statement sent to a backend
SQL_LOGGER = 'crud.executor'


class ColoredFormatter(logging.Formatter):
    """Console formatter adding a color and an emoji per level.

    Attributes:
        COLORS: Dict mapping log levels to ANSI color codes
        EMOJI: Dict mapping log levels to emoji indicators
    """

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    EMOJI = {
        'DEBUG': '🔍',
        'INFO': 'ℹ️ ',
        'WARNING': '⚠️ ',
        'ERROR': '❌',
        'CRITICAL': '🔥'
    }

    def format(self, record):
        plain = record.levelname
        record.emoji = self.EMOJI.get(plain, '')
        if plain in self.COLORS:
            record.levelname = f"{self.COLORS[plain]}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # The same record reaches the file handler uncolored
            record.levelname = plain


def resolve_level(level: Union[str, int, None]) -> int:
    """Turn a level name or number into a logging level.

    Raises:
        ConfigurationError: If the name is not a logging level
    """
    if isinstance(level, int):
        return level
    name = (level or os.getenv('LOG_LEVEL') or 'INFO').upper()
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ConfigurationError(f"Unknown log level '{name}'")
    return value


def get_logger(name: str, level: Union[str, int, None] = None) -> logging.Logger:
    """Get a module logger, optionally with its own level.

    Example:
        >>> logger = get_logger(__name__, level='DEBUG')
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(resolve_level(level))
    return logger


def setup_logging(
    log_level: Union[str, int, None] = None,
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    console_output: bool = True,
    use_colors: bool = True,
    sql_echo: Optional[bool] = None
) -> None:
    """Configure the root logger's handlers.

    Replaces any handler already installed, so it is safe to call again to
    reconfigure.

    Args:
        log_level: Root level, defaults to $LOG_LEVEL or INFO
        log_file: Optional log file name (e.g. 'crud.log')
        log_dir: Directory for log_file, defaults to 'logs/'
        console_output: Log to stdout
        use_colors: Color console output
        sql_echo: Log every statement; defaults to $LOG_SQL

    Raises:
        ConfigurationError: If log_level is not a logging level
    """
    level = resolve_level(log_level)
    if sql_echo is None:
        sql_echo = os.getenv('LOG_SQL', '').lower() in ('1', 'true', 'yes')

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    # Handlers pass everything their loggers let through
    handler_level = logging.DEBUG if sql_echo else level

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(handler_level)
        if use_colors:
            console_handler.setFormatter(ColoredFormatter(f'%(emoji)s {LOG_FORMAT}', datefmt=DATE_FORMAT))
        else:
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_dir or 'logs')
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path / log_file, encoding='utf-8')
        file_handler.setLevel(handler_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    logging.getLogger(SQL_LOGGER).setLevel(logging.DEBUG if sql_echo else logging.NOTSET)


def _init_default_logging():
    """Install console logging unless the application already configured some."""
    if not logging.getLogger().handlers:
        setup_logging()


# Auto-initialize on import
_init_default_logging()
