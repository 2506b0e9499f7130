"""
Test suite for sql.dml.

Tests cover:
- insert_statement: column/value correspondence, escaping
- update_statement: assignments, mandatory clause list, default LIMIT 1
- delete_statement: WHERE fragment spacing, default LIMIT 1
- Bind mode: placeholders instead of inline values
- Rejection of empty records
"""

import re

import pytest

from core.exceptions import MalformedInputError
from sql.dml import DEFAULT_DML_LIMIT, delete_statement, insert_statement, update_statement
from sql.preparer import BindPreparer

INSERT_PATTERN = re.compile(r"^INSERT INTO (\w+) \((.*)\) VALUES\((.*)\)$")


@pytest.fixture
def preparer(fake_context):
    return fake_context.preparer()


# ============================================================================
# UNIT TESTS - insert_statement
# ============================================================================


@pytest.mark.smoke
def test_insert_statement_example(preparer):
    """Record{name: Ada, age: 30} into users."""
    statement = insert_statement("users", {"name": "Ada", "age": 30}, preparer)

    assert statement == "INSERT INTO users (name, age) VALUES('Ada', 30)"


@pytest.mark.unit
@pytest.mark.parametrize("size", [1, 2, 5, 12])
def test_insert_statement_columns_match_values(preparer, size):
    """N entries produce N columns and N values in the same order."""
    record = {f"c{i}": (i if i % 2 else f"v{i}") for i in range(size)}
    match = INSERT_PATTERN.match(insert_statement("t", record, preparer))

    assert match is not None
    columns = match.group(2).split(", ")
    values = match.group(3).split(", ")
    assert columns == list(record)
    assert len(values) == size
    for column, value in zip(columns, values):
        index = int(column[1:])
        assert value == (str(index) if index % 2 else f"'v{index}'")


@pytest.mark.unit
def test_insert_statement_escapes_values(preparer):
    statement = insert_statement("users", {"name": "O'Brien", "note": None}, preparer)

    assert statement == "INSERT INTO users (name, note) VALUES('O\\'Brien', NULL)"


@pytest.mark.edge_case
@pytest.mark.parametrize("record", [{}, None, {"": 1}, {3: "x"}])
def test_insert_statement_rejects_bad_records(preparer, record):
    with pytest.raises(MalformedInputError):
        insert_statement("users", record, preparer)


# ============================================================================
# UNIT TESTS - update_statement
# ============================================================================


@pytest.mark.unit
def test_update_statement(preparer):
    statement = update_statement("users", {"name": "Ada", "age": 31}, [("id", "=", 1)], preparer)

    assert statement == "UPDATE users SET name = 'Ada', age = 31 WHERE id = 1 LIMIT 1"


@pytest.mark.unit
def test_update_statement_custom_limit(preparer):
    statement = update_statement(
        "users", {"age": 0}, [("age", "<", 0), ("deleted_at", "IS NULL")], preparer, limit=10
    )

    assert statement == "UPDATE users SET age = 0 WHERE age < 0 AND deleted_at IS NULL LIMIT 10"


@pytest.mark.edge_case
def test_update_statement_requires_clauses(preparer):
    """UPDATE without a clause list is rejected."""
    with pytest.raises(MalformedInputError, match="clause list"):
        update_statement("users", {"age": 1}, [], preparer)


@pytest.mark.edge_case
def test_update_statement_requires_record(preparer):
    with pytest.raises(MalformedInputError):
        update_statement("users", {}, [("id", "=", 1)], preparer)


# ============================================================================
# UNIT TESTS - delete_statement
# ============================================================================


@pytest.mark.smoke
def test_delete_statement_example(preparer):
    """A space always separates the WHERE fragment from LIMIT."""
    statement = delete_statement("users", [("id", "=", 45), ("age", ">", 50)], preparer)

    assert statement == "DELETE FROM users WHERE id = 45 AND age > 50 LIMIT 1"


@pytest.mark.unit
def test_delete_statement_without_clauses_keeps_limit(preparer):
    assert DEFAULT_DML_LIMIT == 1
    assert delete_statement("users", [], preparer) == "DELETE FROM users LIMIT 1"


@pytest.mark.unit
def test_delete_statement_custom_limit(preparer):
    assert delete_statement("users", [("age", "IS NULL")], preparer, limit=3) == (
        "DELETE FROM users WHERE age IS NULL LIMIT 3"
    )


@pytest.mark.edge_case
def test_delete_statement_rejects_bad_limit(preparer):
    with pytest.raises(MalformedInputError):
        delete_statement("users", [("id", "=", 1)], preparer, limit=-5)


# ============================================================================
# INTEGRATION TESTS - bind mode
# ============================================================================


@pytest.mark.integration
def test_insert_statement_bind_mode(fake_driver):
    binder = BindPreparer(fake_driver)
    statement = insert_statement("users", {"name": "Ada", "age": 30}, binder)

    assert statement == "INSERT INTO users (name, age) VALUES(%(p0)s, %(p1)s)"
    assert binder.params == {"p0": "Ada", "p1": 30}


@pytest.mark.integration
def test_update_statement_bind_mode(fake_driver):
    binder = BindPreparer(fake_driver)
    statement = update_statement("users", {"age": 31}, [("name", "=", "O'Brien")], binder)

    assert statement == "UPDATE users SET age = %(p0)s WHERE name = %(p1)s LIMIT 1"
    assert binder.params == {"p0": 31, "p1": "O'Brien"}
