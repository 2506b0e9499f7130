"""
=====================================
Exception hierarchy for the CRUD layer.
=====================================

Every error raised by this package derives from DatabaseError so callers can
catch the whole family with a single except clause. Driver exceptions
(pymysql.Error, psycopg2.Error, sqlite3.Error) never escape a driver; they are
translated into DriverError at the driver boundary.

Example:
    >>> from core.exceptions import DriverError, MalformedInputError
    >>>
    >>> try:
    ...     db.update('users', {}, [('id', '=', 1)])
    ... except MalformedInputError as e:
    ...     print(f"Rejected before reaching the database: {e}")
    ... except DriverError as e:
    ...     print(f"Database said no: {e.message} ({e.code})")
"""

from typing import Optional, Union


class DatabaseError(Exception):
    """Base exception for all CRUD layer errors."""
    pass


class ConfigurationError(DatabaseError):
    """Exception raised when no backend matches the configured default.

    Also raised when a default connection handle is requested for a backend
    that has not been opened.
    """
    pass


class DatabaseConnectionError(DatabaseError):
    """Exception raised when a connection cannot be opened or is unusable."""
    pass


class MalformedInputError(DatabaseError, ValueError):
    """Exception raised when statement input is rejected before building SQL.

    Covers predicates of the wrong arity, empty records for INSERT/UPDATE,
    UPDATE without a clause list, unknown ordering directions, invalid limits
    and values that cannot be rendered as SQL literals.
    """
    pass


class DriverError(DatabaseError):
    """Exception raised when the backend rejects a statement.

    Attributes:
        message: Error message reported by the driver
        code: Driver specific error code (MySQL errno, SQLSTATE, ...)
        statement: Statement text that failed, when known
    """

    def __init__(
        self,
        message: str,
        code: Optional[Union[int, str]] = None,
        statement: Optional[str] = None
    ):
        self.message = message
        self.code = code
        self.statement = statement
        super().__init__(f"{message} ({code})" if code is not None else message)


class StatementInterruptedError(DriverError):
    """Exception raised when a statement is cancelled or exceeds its timeout."""
    pass
