"""
==================================================
SQL statement construction for the CRUD layer.
==================================================

This package turns structured input (records, clause lists, ordering and
limit directives) into SQL text. It performs no I/O; the only thing it needs
from the outside world is a ValuePreparer, which escapes values on a live
connection or turns them into bind placeholders.

The package follows a clear organization:
    - preparer.py: Value preparation (escaping/quoting or binding)
    - query_builder.py: WHERE/ORDER BY/LIMIT fragments and SELECT (_builder suffix)
    - dml.py: INSERT/UPDATE/DELETE statements (_statement suffix)

Architecture:
    - dml.py imports from query_builder.py (not vice versa)
    - All SQL generation is pure functions of their arguments
    - Malformed input raises MalformedInputError before any text is produced

Example:
    >>> from sql.preparer import LiteralPreparer
    >>> from sql.dml import insert_statement
    >>> from sql.query_builder import select_builder
    >>>
    >>> preparer = LiteralPreparer(driver, handle)
    >>> insert_statement('users', {'name': 'Ada', 'age': 30}, preparer)
    "INSERT INTO users (name, age) VALUES('Ada', 30)"
"""

__version__ = "1.0.0"
__all__ = [
    # Value preparation
    'LiteralPreparer', 'BindPreparer', 'prepare_value', 'prepare_record', 'is_numeric',
    # Query builders
    'select_builder', 'where_builder', 'order_by_builder', 'limit_builder',
    # DML statements
    'insert_statement', 'update_statement', 'delete_statement'
]

from .dml import delete_statement, insert_statement, update_statement
from .preparer import (
    BindPreparer,
    LiteralPreparer,
    is_numeric,
    prepare_record,
    prepare_value,
)
from .query_builder import (
    limit_builder,
    order_by_builder,
    select_builder,
    where_builder,
)
