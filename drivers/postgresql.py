"""
==================================
PostgreSQL driver built on psycopg2.
==================================

Escaping is connection-bound: a QuotedString adapter is prepared against the
live connection so libpq's PQescapeStringConn applies the server's encoding
and standard_conforming_strings setting. The adapter returns a complete
literal ('...' or E'...'); the quotes are stripped here because the Value
Preparer adds its own.

Timeouts set statement_timeout around the statement; cancellation uses
connection.cancel(), which is safe to call from another thread.
"""

import logging
import math
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import psycopg2
from psycopg2 import extensions

from core.config import ConnectionConfig
from core.exceptions import (
    DatabaseConnectionError,
    DriverError,
    StatementInterruptedError,
)
from drivers.base import Driver

logger = logging.getLogger(__name__)


class PostgreSQLDriver(Driver):
    """Driver for PostgreSQL servers."""

    name = 'postgresql'
    error_class = psycopg2.Error

    def connect(self, config: ConnectionConfig) -> extensions.connection:
        kwargs = dict(
            host=config.socket or config.host,
            user=config.user,
            password=config.password,
            dbname=config.database
        )
        if config.port:
            kwargs['port'] = config.port
        if config.connect_timeout:
            kwargs['connect_timeout'] = math.ceil(config.connect_timeout)

        try:
            conn = psycopg2.connect(**kwargs)
        except psycopg2.Error as e:
            raise DatabaseConnectionError(
                f"PostgreSQL connection to {config.host}:{config.port}/{config.database} failed: {e}"
            ) from e
        conn.autocommit = True
        return conn

    def escape(self, handle: Any, raw: str) -> str:
        self.ensure_handle(handle)
        adapter = extensions.QuotedString(raw)
        adapter.prepare(handle)
        codec = extensions.encodings.get(handle.encoding, 'utf-8')
        literal = adapter.getquoted().decode(codec)
        if literal.startswith('E'):
            literal = literal[1:]
        return literal[1:-1]

    def last_insert_id(self, handle: Any) -> int:
        with self.ensure_handle(handle).cursor() as cursor:
            cursor.execute("SELECT LASTVAL()")
            return cursor.fetchone()[0]

    def cancel(self, handle: Any, config: Optional[ConnectionConfig] = None) -> None:
        self.ensure_handle(handle).cancel()
        logger.info("Sent cancel request to PostgreSQL backend")

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

        with handle.cursor() as cursor:
            cursor.execute("SET statement_timeout = %s", (int(timeout * 1000),))
        try:
            yield
        finally:
            try:
                with handle.cursor() as cursor:
                    cursor.execute("RESET statement_timeout")
            except psycopg2.Error as e:
                logger.warning(f"Could not reset statement_timeout: {e}")

    def translate_error(self, error: Exception, statement: Optional[str] = None) -> DriverError:
        code = getattr(error, 'pgcode', None)
        message = (getattr(error, 'pgerror', None) or str(error)).strip()

        if isinstance(error, extensions.QueryCanceledError):
            return StatementInterruptedError(message, code=code, statement=statement)
        return DriverError(message, code=code, statement=statement)
