"""
=====================
CRUD operations facade.
=====================

Database wires the pieces together for the four CRUD operations:

    caller -> fillables (optional) -> statement builder (sql.dml /
    sql.query_builder, with the context's ValuePreparer) -> StatementExecutor
    -> driver -> normalized result

Every method accepts a per-call `context` overriding the facade's default,
which is how a different connection or descriptor is used for one call, and
a per-call `timeout`.

Statement building and execution for one call happen inside a single
`context.session()`, so the handle is never shared between two operations.

Example:
    >>> from crud.context import DatabaseContext
    >>> from crud.database import Database
    >>>
    >>> db = Database(DatabaseContext.open(config.database))
    >>> user_id = db.create('users', {'name': 'Ada', 'age': 30}, return_insert_id=True)
    >>> db.read('users', [('id', '=', user_id)])
    [{'id': 1, 'name': 'Ada', 'age': 30}]
    >>> db.update('users', {'age': 31}, [('id', '=', user_id)])
    1
    >>> db.delete('users', [('id', '=', user_id)])
    1
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd

from crud.context import DatabaseContext
from crud.executor import StatementExecutor, normalize_rows
from crud.fillables import fillables
from drivers.base import QueryResult
from sql.dml import DEFAULT_DML_LIMIT, delete_statement, insert_statement, update_statement
from sql.preparer import ValuePreparer
from sql.query_builder import DEFAULT_SELECT_LIMIT, ClauseList, select_builder

logger = logging.getLogger(__name__)


class Database:
    """CRUD operations over a DatabaseContext.

    Attributes:
        context: Default context for every call
        timeout: Default per-statement timeout in seconds
        bind_parameters: Send values as bound parameters (default); False falls
            back to escaped inline text
    """

    def __init__(
        self,
        context: DatabaseContext,
        timeout: Optional[float] = None,
        bind_parameters: bool = True
    ):
        self.context = context
        self.timeout = timeout
        self.bind_parameters = bind_parameters

    def _run(
        self,
        ctx: DatabaseContext,
        build: Callable[[ValuePreparer], str],
        timeout: Optional[float]
    ) -> QueryResult:
        # Caller holds ctx.session()
        preparer = ctx.preparer(self.bind_parameters)
        statement = build(preparer)
        params = getattr(preparer, 'params', None) or None
        return StatementExecutor(ctx, self.timeout).execute(statement, params, timeout)

    def create(
        self,
        table: str,
        data: Mapping[str, Any],
        return_insert_id: bool = False,
        fillable: Optional[Sequence[str]] = None,
        context: Optional[DatabaseContext] = None,
        timeout: Optional[float] = None
    ) -> Union[bool, int]:
        """
        Insert one record.

        Args:
            table: Target table
            data: Column -> value mapping
            return_insert_id: Return the generated id instead of True
            fillable: Optional whitelist applied to data first
            context: Per-call context override
            timeout: Per-call timeout in seconds

        Returns:
            True, or the last insert id when requested
        """
        ctx = context or self.context
        record = fillables(data, fillable) if fillable is not None else data

        with ctx.session():
            self._run(ctx, lambda p: insert_statement(table, record, p), timeout)
            if not return_insert_id:
                return True
            try:
                insert_id = ctx.driver.last_insert_id(ctx.handle)
            except ctx.driver.error_class as e:
                raise ctx.driver.translate_error(e) from e

        logger.debug(f"Inserted into {table}, id={insert_id}")
        return insert_id

    def read(
        self,
        table: str,
        clauses: Optional[ClauseList] = None,
        columns: Optional[Union[Sequence[str], str]] = None,
        limit: int = DEFAULT_SELECT_LIMIT,
        order: Optional[Sequence[str]] = None,
        context: Optional[DatabaseContext] = None,
        timeout: Optional[float] = None,
        legacy_shape: bool = False
    ) -> Union[List[Dict[str, Any]], Dict[str, Any], None]:
        """
        Select rows.

        Args:
            table: Source table
            clauses: Clause list for the WHERE fragment
            columns: Columns to select, defaults to all
            limit: Maximum rows, defaults to 15
            order: (column[, ASC|DESC]) ordering
            context: Per-call context override
            timeout: Per-call timeout in seconds
            legacy_shape: Return a bare dict for a single row, None for none

        Returns:
            List of row dicts (see legacy_shape)
        """
        ctx = context or self.context
        with ctx.session():
            result = self._run(
                ctx,
                lambda p: select_builder(table, p, clauses=clauses, columns=columns, order=order, limit=limit),
                timeout
            )
        return normalize_rows(result.rows, legacy=legacy_shape)

    def read_frame(
        self,
        table: str,
        clauses: Optional[ClauseList] = None,
        columns: Optional[Sequence[str]] = None,
        limit: int = DEFAULT_SELECT_LIMIT,
        order: Optional[Sequence[str]] = None,
        context: Optional[DatabaseContext] = None,
        timeout: Optional[float] = None
    ) -> pd.DataFrame:
        """Select rows into a pandas DataFrame (same arguments as read)."""
        rows = self.read(
            table, clauses=clauses, columns=columns, limit=limit, order=order,
            context=context, timeout=timeout
        )
        if not rows and columns and not isinstance(columns, str):
            return pd.DataFrame(columns=list(columns))
        return pd.DataFrame.from_records(rows)

    def update(
        self,
        table: str,
        data: Mapping[str, Any],
        clauses: ClauseList,
        limit: int = DEFAULT_DML_LIMIT,
        fillable: Optional[Sequence[str]] = None,
        context: Optional[DatabaseContext] = None,
        timeout: Optional[float] = None
    ) -> int:
        """
        Update rows matching a clause list.

        Returns:
            Number of affected rows (0 is a valid outcome)
        """
        ctx = context or self.context
        record = fillables(data, fillable) if fillable is not None else data

        with ctx.session():
            result = self._run(ctx, lambda p: update_statement(table, record, clauses, p, limit=limit), timeout)
        return result.affected_rows

    def delete(
        self,
        table: str,
        clauses: Optional[ClauseList],
        limit: int = DEFAULT_DML_LIMIT,
        context: Optional[DatabaseContext] = None,
        timeout: Optional[float] = None
    ) -> int:
        """
        Delete rows matching a clause list, at most `limit` of them.

        Returns:
            Number of affected rows (0 is a valid outcome)
        """
        ctx = context or self.context
        with ctx.session():
            result = self._run(ctx, lambda p: delete_statement(table, clauses, p, limit=limit), timeout)
        return result.affected_rows
