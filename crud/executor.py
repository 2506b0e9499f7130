"""
==================
Statement executor.
==================

Submits finished statement text to the context's driver and returns a
QueryResult. Driver failures are logged and re-raised as DriverError for the
caller to handle; a failing statement never terminates the process. A
statement that affects zero rows is a success, not a failure.

Result shape: `fetch` always returns a list of row dicts. The historical
"one row comes back as a bare dict" convention is available only through
`normalize_rows(rows, legacy=True)`.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from core.exceptions import DriverError, StatementInterruptedError
from crud.context import DatabaseContext
from drivers.base import QueryResult

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class StatementExecutor:
    """Run statements on a DatabaseContext.

    Attributes:
        context: Context providing driver and handle
        timeout: Default per-statement timeout in seconds (None = no timeout)
    """

    def __init__(self, context: DatabaseContext, timeout: Optional[float] = None):
        self.context = context
        self.timeout = timeout

    def execute(
        self,
        statement: str,
        params: Optional[Mapping[str, Any]] = None,
        timeout: Optional[float] = None
    ) -> QueryResult:
        """
        Execute a statement.

        Args:
            statement: SQL text
            params: Bound values for placeholder statements
            timeout: Per-call timeout overriding the executor default

        Returns:
            QueryResult

        Raises:
            DriverError: If the backend rejects the statement
            StatementInterruptedError: On timeout or cancellation
        """
        timeout = self.timeout if timeout is None else timeout
        ctx = self.context

        logger.debug(f"[{ctx.backend}] {statement}" + (f" -- params={dict(params)}" if params else ""))
        with ctx.session():
            try:
                result = ctx.driver.execute(ctx.handle, statement, params, timeout)
            except StatementInterruptedError as e:
                logger.warning(f"Statement interrupted on {ctx.backend}: {e.message}")
                raise
            except DriverError as e:
                logger.error(f"Database query failed: {e.message} ({e.code})")
                raise

        logger.debug(f"[{ctx.backend}] {result.row_count} rows returned, {result.affected_rows} affected")
        return result

    def fetch(
        self,
        statement: str,
        params: Optional[Mapping[str, Any]] = None,
        timeout: Optional[float] = None
    ) -> List[Row]:
        """Execute a statement and return its rows (always a list)."""
        return self.execute(statement, params, timeout).rows


def normalize_rows(rows: List[Row], legacy: bool = False) -> Union[List[Row], Row, None]:
    """Optionally collapse a result set to the legacy single-row shape.

    With legacy=True exactly one row is returned as a dict and zero rows as
    None; several rows stay a list. With legacy=False rows are returned as-is.
    """
    if not legacy:
        return rows
    if len(rows) == 1:
        return rows[0]
    if not rows:
        return None
    return rows
