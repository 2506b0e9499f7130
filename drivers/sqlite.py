"""
=================================
SQLite driver built on sqlite3.
=================================

Handy for local development and tests. SQLite has no connection-bound escape
routine; doubling single quotes is the complete escaping rule because
backslashes are not special in SQLite string literals.

Note that UPDATE ... LIMIT and DELETE ... LIMIT are only accepted by SQLite
builds compiled with SQLITE_ENABLE_UPDATE_DELETE_LIMIT.
"""

import sqlite3
import time
from contextlib import contextmanager
from datetime import date, datetime
from datetime import time as time_of_day
from decimal import Decimal
from typing import Any, Iterator, Optional

from core.config import ConnectionConfig
from core.exceptions import (
    DatabaseConnectionError,
    DriverError,
    StatementInterruptedError,
)
from drivers.base import Driver

# VM instructions between deadline checks
PROGRESS_INTERVAL = 1000


class SQLiteDriver(Driver):
    """Driver for SQLite database files and in-memory databases."""

    name = 'sqlite'
    error_class = sqlite3.Error
    pyformat = False

    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        try:
            return sqlite3.connect(
                config.database or ':memory:',
                timeout=config.connect_timeout or 5.0,
                isolation_level=None,
                check_same_thread=False
            )
        except sqlite3.Error as e:
            raise DatabaseConnectionError(f"SQLite database {config.database!r} could not be opened: {e}") from e

    def escape(self, handle: Any, raw: str) -> str:
        self.ensure_handle(handle)
        return raw.replace("'", "''")

    def placeholder(self, name: str) -> str:
        return f":{name}"

    def adapt_param(self, value: Any) -> Any:
        """Bind Decimal as exact text and temporal values as ISO text.

        sqlite3 has no Decimal adapter, and its default date/datetime adapters
        are deprecated since Python 3.12. Column affinity turns numeric text
        back into INTEGER or REAL.
        """
        if isinstance(value, Decimal):
            return str(value)
        if isinstance(value, datetime):
            return value.isoformat(sep=' ')
        if isinstance(value, (date, time_of_day)):
            return value.isoformat()
        return value

    def last_insert_id(self, handle: Any) -> int:
        return self.ensure_handle(handle).execute("SELECT last_insert_rowid()").fetchone()[0]

    def cancel(self, handle: Any, config: Optional[ConnectionConfig] = None) -> None:
        self.ensure_handle(handle).interrupt()

    @contextmanager
    def statement_timeout(
        self,
        handle: Any,
        statement: str,
        timeout: Optional[float]
    ) -> Iterator[None]:
        if not timeout:
            yield
            return

        deadline = time.monotonic() + timeout
        handle.set_progress_handler(lambda: int(time.monotonic() > deadline), PROGRESS_INTERVAL)
        try:
            yield
        finally:
            handle.set_progress_handler(None, 0)

    def translate_error(self, error: Exception, statement: Optional[str] = None) -> DriverError:
        code = getattr(error, 'sqlite_errorname', None)
        message = str(error)

        if isinstance(error, sqlite3.OperationalError) and 'interrupted' in message:
            return StatementInterruptedError(message, code=code, statement=statement)
        return DriverError(message, code=code, statement=statement)
