"""
===========================================
Data Manipulation Language (DML) Utilities.
===========================================

This module builds the INSERT, UPDATE and DELETE statements of the CRUD
layer. Value escaping is delegated to the ValuePreparer and WHERE fragments
to sql.query_builder.where_builder; nothing here escapes on its own.

Functions:
- insert_statement: INSERT INTO table (cols) VALUES(vals)
- update_statement: UPDATE table SET col = val, ... WHERE ... LIMIT n
- delete_statement: DELETE FROM table WHERE ... LIMIT n

UPDATE and DELETE always carry a LIMIT; it defaults to 1 so that a missing
or too-broad clause list cannot touch the whole table.

Usage:
    from sql.dml import insert_statement, delete_statement

    insert_statement('users', {'name': 'Ada', 'age': 30}, preparer)
    # "INSERT INTO users (name, age) VALUES('Ada', 30)"

    delete_statement('users', [('id', '=', 45)], preparer)
    # 'DELETE FROM users WHERE id = 45 LIMIT 1'
"""

from typing import Any, Mapping, Optional

from core.exceptions import MalformedInputError
from sql.preparer import ValuePreparer
from sql.query_builder import ClauseList, limit_builder, table_builder, where_builder

DEFAULT_DML_LIMIT = 1


def _require_record(record: Mapping[str, Any], operation: str) -> None:
    if not isinstance(record, Mapping) or not record:
        raise MalformedInputError(f"{operation} needs at least one column/value pair, got {record!r}")
    for column in record:
        if not isinstance(column, str) or not column.strip():
            raise MalformedInputError(f"Column names must be non-empty strings, got {column!r}")


def insert_statement(table: str, record: Mapping[str, Any], preparer: ValuePreparer) -> str:
    """
    Generate an INSERT statement for one record.

    Columns and values come from a single pass over the prepared record, so
    their positions always correspond.

    Args:
        table: Table name
        record: Column -> value mapping
        preparer: ValuePreparer for the values

    Returns:
        SQL INSERT statement
    """
    _require_record(record, 'INSERT')
    prepared = preparer.prepare_record(record)

    columns = ", ".join(prepared.keys())
    values = ", ".join(prepared.values())
    return f"INSERT INTO {table_builder(table)} ({columns}) VALUES({values})"


def update_statement(
    table: str,
    record: Mapping[str, Any],
    clauses: ClauseList,
    preparer: ValuePreparer,
    limit: int = DEFAULT_DML_LIMIT
) -> str:
    """
    Generate an UPDATE statement.

    Args:
        table: Table name
        record: Column -> new value mapping
        clauses: Clause list selecting the rows; must not be empty
        preparer: ValuePreparer for values
        limit: Maximum number of rows to update

    Returns:
        SQL UPDATE statement
    """
    _require_record(record, 'UPDATE')
    if not clauses:
        raise MalformedInputError("UPDATE needs a non-empty clause list")

    assignments = ", ".join(
        f"{column} = {value}" for column, value in preparer.prepare_record(record).items()
    )
    return (
        f"UPDATE {table_builder(table)} SET {assignments}"
        f"{where_builder(clauses, preparer)}"
        f"{limit_builder(limit)}"
    )


def delete_statement(
    table: str,
    clauses: Optional[ClauseList],
    preparer: ValuePreparer,
    limit: int = DEFAULT_DML_LIMIT
) -> str:
    """
    Generate a DELETE statement.

    Args:
        table: Table name
        clauses: Clause list selecting the rows
        preparer: ValuePreparer for clause values
        limit: Maximum number of rows to delete

    Returns:
        SQL DELETE statement
    """
    return (
        f"DELETE FROM {table_builder(table)}"
        f"{where_builder(clauses, preparer)}"
        f"{limit_builder(limit)}"
    )
