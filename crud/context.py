"""
======================================
Explicit execution context for CRUD calls.
======================================

A DatabaseContext bundles everything a CRUD call needs: the selected driver,
one open connection handle and that connection's descriptor. It replaces any
process-wide "current connection" state; callers pass a context (or a
Database facade built on one) to every operation.

A handle must serve one logical operation at a time. The context owns a
reentrant lock and every operation runs inside `session()`, so statement
building (escaping uses the handle) and execution are never interleaved with
another thread's work on the same handle. For parallel work give each worker
its own context. `cancel()` does not take the lock.

Example:
    >>> from core.config import config
    >>> from crud.context import DatabaseContext
    >>>
    >>> with DatabaseContext.open(config.database, backend='sqlite') as ctx:
    ...     with ctx.session():
    ...         ctx.driver.execute(ctx.handle, "SELECT 1")
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from core.config import ConnectionConfig, DatabaseConfig
from drivers import Driver, get_driver
from sql.preparer import BindPreparer, LiteralPreparer, ValuePreparer

logger = logging.getLogger(__name__)


class DatabaseContext:
    """Driver, handle and descriptor for one connection.

    Attributes:
        driver: Driver implementing the backend
        handle: Open connection handle (None once closed)
        backend: Backend name the context was opened for
        connection_config: Descriptor the handle was opened with
    """

    def __init__(
        self,
        driver: Driver,
        handle: Any,
        backend: Optional[str] = None,
        connection_config: Optional[ConnectionConfig] = None
    ):
        self.driver = driver
        self.handle = handle
        self.backend = backend or driver.name
        self.connection_config = connection_config
        self._lock = threading.RLock()

    @classmethod
    def open(cls, database_config: DatabaseConfig, backend: Optional[str] = None) -> 'DatabaseContext':
        """Open a new connection for a backend and wrap it in a context.

        Args:
            database_config: Config descriptor
            backend: Backend name, defaults to the descriptor's default

        Raises:
            ConfigurationError: If the backend is unknown
            DatabaseConnectionError: If the connection cannot be opened
        """
        name = backend or database_config.default
        driver = get_driver(name)
        connection_config = database_config.connection(name)
        handle = driver.connect(connection_config)
        logger.debug(f"Opened {name} context")
        return cls(driver, handle, backend=name, connection_config=connection_config)

    @property
    def closed(self) -> bool:
        return self.handle is None

    @contextmanager
    def session(self) -> Iterator['DatabaseContext']:
        """Hold the handle exclusively for the duration of the block."""
        with self._lock:
            yield self

    def preparer(self, bind_parameters: bool = False) -> ValuePreparer:
        """Return a fresh ValuePreparer bound to this context."""
        if bind_parameters:
            return BindPreparer(self.driver)
        return LiteralPreparer(self.driver, self.handle)

    def cancel(self) -> None:
        """Interrupt the statement currently running on this handle."""
        self.driver.cancel(self.driver.ensure_handle(self.handle), self.connection_config)

    def close(self) -> None:
        """Close the handle; further closes are no-ops."""
        with self._lock:
            if self.handle is None:
                return
            handle, self.handle = self.handle, None
            self.driver.close(handle)
            logger.debug(f"Closed {self.backend} context")

    def __enter__(self) -> 'DatabaseContext':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        state = 'closed' if self.closed else 'open'
        return f"<DatabaseContext backend={self.backend!r} {state}>"
