"""
====================================
MySQL / MariaDB driver built on PyMySQL.
====================================

Escaping goes through Connection.escape_string, which honours the server's
NO_BACKSLASH_ESCAPES mode reported on the live connection. Connections are
opened in autocommit mode; there is no transaction management.

Timeouts use MAX_EXECUTION_TIME, which MySQL only enforces for SELECT; other
statements rely on the connection's read_timeout. Cancellation issues
KILL QUERY over a short-lived side connection.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import pymysql

from core.config import ConnectionConfig
from core.exceptions import (
    DatabaseConnectionError,
    DriverError,
    StatementInterruptedError,
)
from drivers.base import Driver

logger = logging.getLogger(__name__)

# ER_QUERY_INTERRUPTED, ER_QUERY_TIMEOUT
MYSQL_INTERRUPTED_ERRORS = (1317, 3024)


class MySQLDriver(Driver):
    """Driver for MySQL and MariaDB servers."""

    name = 'mysql'
    error_class = pymysql.Error

    def connect(self, config: ConnectionConfig) -> pymysql.connections.Connection:
        kwargs = dict(
            host=config.host or 'localhost',
            user=config.user or None,
            password=config.password,
            database=config.database or None,
            charset='utf8mb4',
            autocommit=True
        )
        if config.port:
            kwargs['port'] = config.port
        if config.socket:
            kwargs['unix_socket'] = config.socket
        if config.connect_timeout:
            kwargs['connect_timeout'] = config.connect_timeout
        if config.read_timeout:
            kwargs['read_timeout'] = config.read_timeout

        try:
            return pymysql.connect(**kwargs)
        except pymysql.Error as e:
            raise DatabaseConnectionError(
                f"MySQL connection to {config.host}:{config.port} failed: {e}"
            ) from e

    def escape(self, handle: Any, raw: str) -> str:
        return self.ensure_handle(handle).escape_string(raw)

    def last_insert_id(self, handle: Any) -> int:
        return self.ensure_handle(handle).insert_id()

    def cancel(self, handle: Any, config: Optional[ConnectionConfig] = None) -> None:
        if config is None:
            raise DatabaseConnectionError("Cancelling a MySQL statement needs the connection config")

        thread_id = int(self.ensure_handle(handle).thread_id())
        side = self.connect(config)
        try:
            with side.cursor() as cursor:
                cursor.execute(f"KILL QUERY {thread_id}")
            logger.info(f"Sent KILL QUERY for MySQL thread {thread_id}")
        except pymysql.Error as e:
            raise self.translate_error(e, f"KILL QUERY {thread_id}") from e
        finally:
            side.close()

    @contextmanager
    def statement_timeout(
        self,
        handle: Any,
        statement: str,
        timeout: Optional[float]
    ) -> Iterator[None]:
        if not timeout or not statement.lstrip().upper().startswith('SELECT'):
            yield
            return

        with handle.cursor() as cursor:
            cursor.execute("SET SESSION MAX_EXECUTION_TIME = %s", (int(timeout * 1000),))
        try:
            yield
        finally:
            try:
                with handle.cursor() as cursor:
                    cursor.execute("SET SESSION MAX_EXECUTION_TIME = 0")
            except pymysql.Error as e:
                logger.warning(f"Could not reset MAX_EXECUTION_TIME: {e}")

    def translate_error(self, error: Exception, statement: Optional[str] = None) -> DriverError:
        args = getattr(error, 'args', ())
        if len(args) >= 2 and isinstance(args[0], int):
            code, message = args[0], str(args[1])
        else:
            code, message = None, str(error)

        if code in MYSQL_INTERRUPTED_ERRORS:
            return StatementInterruptedError(message, code=code, statement=statement)
        return DriverError(message, code=code, statement=statement)
