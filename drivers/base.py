"""
=======================================
Driver interface shared by every backend.
=======================================

A Driver is a stateless adapter around one DB-API module. It never owns a
connection handle: handles are opened by the ConnectionManager and passed in
on every call, so a single driver instance can serve any number of contexts.

Subclasses implement connect, escape, last_insert_id and cancel, and may
override placeholder, translate_error and statement_timeout. Statement
execution, result-set draining and error translation live here.

Example:
    >>> from drivers import get_driver
    >>>
    >>> driver = get_driver('sqlite')
    >>> handle = driver.connect(config.database.connection('sqlite'))
    >>> result = driver.execute(handle, "SELECT 1 AS one")
    >>> result.rows
    [{'one': 1}]
"""

import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Type

from core.config import ConnectionConfig
from core.exceptions import DatabaseConnectionError, DriverError, MalformedInputError


@dataclass
class QueryResult:
    """Normalized response of a single statement.

    Attributes:
        rows: Result set as a list of column->value dicts (empty for DML)
        row_count: Number of rows in the result set
        affected_rows: Rows changed by INSERT/UPDATE/DELETE (0 for SELECT)
    """

    rows: List[Dict[str, Any]] = field(default_factory=list)
    row_count: int = 0
    affected_rows: int = 0


class Driver(ABC):
    """Base class for backend drivers.

    Attributes:
        name: Backend name used in the config descriptor
        error_class: Base exception class of the DB-API module
    """

    name: str = ''
    error_class: Type[Exception] = Exception
    # Drivers whose placeholders are %(name)s read every other % as a format character
    pyformat: bool = True

    @abstractmethod
    def connect(self, config: ConnectionConfig) -> Any:
        """Open a new connection handle in autocommit mode."""

    def close(self, handle: Any) -> None:
        """Release a connection handle."""
        handle.close()

    @abstractmethod
    def escape(self, handle: Any, raw: str) -> str:
        """Escape a string for inclusion between single quotes."""

    @abstractmethod
    def last_insert_id(self, handle: Any) -> int:
        """Return the id generated by the last INSERT on this handle."""

    @abstractmethod
    def cancel(self, handle: Any, config: Optional[ConnectionConfig] = None) -> None:
        """Interrupt the statement currently running on a handle.

        Safe to call from a thread other than the one executing.
        """

    def placeholder(self, name: str) -> str:
        """Return the bind placeholder for a named parameter (pyformat)."""
        return f"%({name})s"

    def adapt_param(self, value: Any) -> Any:
        """Convert a value to a type the DB-API module can bind."""
        return value

    def protect_percent(self, statement: str, params: Mapping[str, Any]) -> str:
        """Double every % in a pyformat statement except the parameter placeholders.

        Column names, operators and 2-element predicates are emitted verbatim, so
        text such as `DATE_FORMAT(created, '%Y')` or `LIKE 'a%'` must survive
        the driver's `statement % params` step unchanged.
        """
        if not self.pyformat:
            return statement
        names = "|".join(re.escape(name) for name in params)
        return re.sub(rf"%(?!\((?:{names})\)s)", "%%", statement)

    def ensure_handle(self, handle: Any) -> Any:
        if handle is None:
            raise DatabaseConnectionError(
                f"No usable {self.name} connection; open one before issuing statements"
            )
        return handle

    @contextmanager
    def statement_timeout(
        self,
        handle: Any,
        statement: str,
        timeout: Optional[float]
    ) -> Iterator[None]:
        """Apply a per-statement timeout for the duration of the block."""
        yield

    def translate_error(self, error: Exception, statement: Optional[str] = None) -> DriverError:
        """Convert a DB-API exception into a DriverError."""
        return DriverError(str(error), code=None, statement=statement)

    def execute(
        self,
        handle: Any,
        statement: str,
        params: Optional[Mapping[str, Any]] = None,
        timeout: Optional[float] = None
    ) -> QueryResult:
        """Run a statement and drain its result set.

        Args:
            handle: Open connection handle
            statement: SQL text
            params: Bound parameters when the statement uses placeholders
            timeout: Optional timeout in seconds

        Returns:
            QueryResult with rows and counts

        Raises:
            DriverError: If the backend rejects the statement
            StatementInterruptedError: If the statement timed out or was cancelled
            MalformedInputError: If the statement text cannot take its parameters
        """
        self.ensure_handle(handle)
        try:
            cursor = handle.cursor()
        except self.error_class as e:
            raise DatabaseConnectionError(f"Cannot open cursor on {self.name} connection: {e}") from e

        try:
            with self.statement_timeout(handle, statement, timeout):
                if params:
                    bound = self.protect_percent(statement, params)
                    try:
                        cursor.execute(bound, dict(params))
                    except (ValueError, KeyError, IndexError, TypeError) as e:
                        raise MalformedInputError(
                            f"Statement could not be combined with its parameters: {e}"
                        ) from e
                else:
                    cursor.execute(statement)
                rows = self._collect_rows(cursor)
                affected = cursor.rowcount if cursor.description is None else 0
            return QueryResult(
                rows=rows,
                row_count=len(rows),
                affected_rows=max(affected or 0, 0)
            )
        except self.error_class as e:
            raise self.translate_error(e, statement) from e
        finally:
            cursor.close()

    @staticmethod
    def _collect_rows(cursor: Any) -> List[Dict[str, Any]]:
        if cursor.description is None:
            return []
        columns = [column[0] for column in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
