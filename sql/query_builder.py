"""
============================
SQL Query Builder Utilities.
============================

This module provides the building blocks for SELECT statements and the
clause fragments shared with sql.dml. All builders follow the _builder
naming convention and are pure functions of their arguments; the only
collaborator is the ValuePreparer, which escapes (or binds) values.

Query Builders:
- where_builder: Translate a clause list into a ` WHERE ... AND ...` fragment
- order_by_builder: Build an ` ORDER BY column [ASC|DESC]` fragment
- limit_builder: Validate and render a ` LIMIT n` fragment
- columns_builder: Render the column list of a SELECT
- select_builder: Compose a complete SELECT statement

A clause list is a sequence of predicates. A predicate is either
`(column, operator)`, emitted verbatim (for `IS NULL`, `IS NOT NULL` and the
like), or `(column, operator, value)`, where the value goes through the
preparer. Columns and operators are trusted text and are not escaped.

Usage:
    from sql.query_builder import select_builder, where_builder

    where_builder([('id', '=', 45), ('age', '>', 50)], preparer)
    # ' WHERE id = 45 AND age > 50'

    select_builder(
        table='users',
        preparer=preparer,
        clauses=[('deleted_at', 'IS NULL')],
        columns=['id', 'name'],
        order=('id', 'DESC'),
        limit=10
    )
    # 'SELECT id, name FROM users WHERE deleted_at IS NULL ORDER BY id DESC LIMIT 10'
"""

from typing import Any, List, Optional, Sequence, Union

from core.exceptions import MalformedInputError
from sql.preparer import ValuePreparer

DEFAULT_SELECT_LIMIT = 15
ORDER_DIRECTIONS = ('ASC', 'DESC')

Predicate = Sequence[Any]
ClauseList = Sequence[Predicate]


def table_builder(table: str) -> str:
    """Validate a table name and return it unchanged."""
    if not isinstance(table, str) or not table.strip():
        raise MalformedInputError(f"Table name must be a non-empty string, got {table!r}")
    return table


def _predicate_builder(predicate: Predicate, preparer: ValuePreparer) -> str:
    if isinstance(predicate, (str, bytes)) or not isinstance(predicate, Sequence):
        raise MalformedInputError(
            f"Predicate must be a (column, operator[, value]) sequence, got {predicate!r}"
        )
    if len(predicate) not in (2, 3):
        raise MalformedInputError(
            f"Predicate must have 2 or 3 elements, got {len(predicate)}: {predicate!r}"
        )

    column, operator = predicate[0], predicate[1]
    for part, label in ((column, 'column'), (operator, 'operator')):
        if not isinstance(part, str) or not part.strip():
            raise MalformedInputError(f"Predicate {label} must be a non-empty string: {predicate!r}")

    if len(predicate) == 2:
        return f"{column} {operator}"
    return f"{column} {operator} {preparer.prepare(predicate[2])}"


def where_builder(clauses: Optional[ClauseList], preparer: ValuePreparer) -> str:
    """
    Translate a clause list into a WHERE fragment.

    Args:
        clauses: Ordered predicates, implicitly joined with AND
        preparer: ValuePreparer used for 3-element predicates

    Returns:
        ' WHERE p1 AND p2 ...', or '' when there are no clauses

    Raises:
        MalformedInputError: If a predicate has the wrong shape
    """
    if not clauses:
        return ""
    return " WHERE " + " AND ".join(
        _predicate_builder(predicate, preparer) for predicate in clauses
    )


def order_by_builder(order: Optional[Sequence[str]]) -> str:
    """
    Build an ORDER BY fragment.

    Args:
        order: (column,) or (column, direction); direction is ASC or DESC

    Returns:
        ' ORDER BY column [DIRECTION]', or '' when order is empty
    """
    if not order:
        return ""
    if isinstance(order, str):
        order = (order,)
    if len(order) > 2:
        raise MalformedInputError(f"Ordering must be (column[, direction]), got {order!r}")

    column = order[0]
    if not isinstance(column, str) or not column.strip():
        raise MalformedInputError(f"Ordering column must be a non-empty string, got {column!r}")
    if len(order) == 1:
        return f" ORDER BY {column}"

    direction = order[1]
    if not isinstance(direction, str) or direction.upper() not in ORDER_DIRECTIONS:
        raise MalformedInputError(
            f"Ordering direction must be one of {', '.join(ORDER_DIRECTIONS)}, got {direction!r}"
        )
    return f" ORDER BY {column} {direction.upper()}"


def limit_builder(limit: int) -> str:
    """Validate a row limit and render ' LIMIT n'."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise MalformedInputError(f"Limit must be a non-negative integer, got {limit!r}")
    return f" LIMIT {limit}"


def columns_builder(columns: Optional[Union[Sequence[str], str]]) -> str:
    """Render a SELECT column list, '*' when no columns are given."""
    if not columns:
        return "*"
    if isinstance(columns, str):
        return columns

    column_list: List[str] = list(columns)
    for column in column_list:
        if not isinstance(column, str) or not column.strip():
            raise MalformedInputError(f"Column names must be non-empty strings, got {column!r}")
    return ", ".join(column_list)


def select_builder(
    table: str,
    preparer: ValuePreparer,
    clauses: Optional[ClauseList] = None,
    columns: Optional[Union[Sequence[str], str]] = None,
    order: Optional[Sequence[str]] = None,
    limit: int = DEFAULT_SELECT_LIMIT
) -> str:
    """
    Build a SELECT statement.

    Args:
        table: Table name
        preparer: ValuePreparer for clause values
        clauses: Clause list for the WHERE fragment
        columns: Columns to select, defaults to '*'
        order: (column[, direction]) ordering directive
        limit: Row limit, defaults to 15

    Returns:
        SQL SELECT statement
    """
    return (
        f"SELECT {columns_builder(columns)} FROM {table_builder(table)}"
        f"{where_builder(clauses, preparer)}"
        f"{order_by_builder(order)}"
        f"{limit_builder(limit)}"
    )
