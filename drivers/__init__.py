"""
=====================================
Pluggable backend drivers.
=====================================

Each backend is a Driver subclass exposing connect, close, execute, escape,
last_insert_id and cancel. The active backend is picked once, from the
config descriptor's `default` key, and injected into a DatabaseContext.

Available drivers:
    - mysql.py       MySQL / MariaDB via PyMySQL
    - postgresql.py  PostgreSQL via psycopg2
    - sqlite.py      SQLite via the sqlite3 module

Example:
    >>> from drivers import get_driver
    >>> driver = get_driver('mysql')
"""

from typing import Dict, Type

from core.exceptions import ConfigurationError
from drivers.base import Driver, QueryResult
from drivers.mysql import MySQLDriver
from drivers.postgresql import PostgreSQLDriver
from drivers.sqlite import SQLiteDriver

__all__ = [
    'Driver', 'QueryResult', 'MySQLDriver', 'PostgreSQLDriver', 'SQLiteDriver',
    'get_driver', 'register_driver'
]

_DRIVERS: Dict[str, Type[Driver]] = {
    'mysql': MySQLDriver,
    'postgresql': PostgreSQLDriver,
    'sqlite': SQLiteDriver,
}


def register_driver(name: str, driver_class: Type[Driver]) -> None:
    """Make a driver class selectable by backend name."""
    _DRIVERS[name] = driver_class


def get_driver(name: str) -> Driver:
    """Instantiate the driver registered for a backend name.

    Raises:
        ConfigurationError: If no driver matches the name
    """
    try:
        return _DRIVERS[name]()
    except KeyError:
        raise ConfigurationError(
            f"No driver registered for backend '{name}'. "
            f"Available: {', '.join(sorted(_DRIVERS))}"
        ) from None
