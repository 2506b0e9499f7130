"""
Test suite for crud.executor and crud.context.

Tests cover:
- StatementExecutor.execute / fetch: delegation, timeouts, logging
- DriverError propagation (recoverable, never process-terminating)
- normalize_rows: list shape and the legacy single-row shape
- DatabaseContext: session exclusivity, preparer selection, cancel, close
"""

import logging
import threading
import time

import pytest

from core.exceptions import DatabaseConnectionError, DriverError, StatementInterruptedError
from crud.context import DatabaseContext
from crud.executor import StatementExecutor, normalize_rows
from drivers.base import QueryResult
from sql.preparer import BindPreparer, LiteralPreparer

# ============================================================================
# UNIT TESTS - StatementExecutor
# ============================================================================


@pytest.mark.unit
def test_execute_delegates_to_driver(fake_driver, fake_context):
    """Statement, params and timeout reach the driver unchanged."""
    fake_driver.results = [QueryResult(affected_rows=1)]
    executor = StatementExecutor(fake_context)

    result = executor.execute("DELETE FROM users LIMIT 1", {"p0": 1}, timeout=2.5)

    assert result.affected_rows == 1
    assert fake_driver.executed == [("DELETE FROM users LIMIT 1", {"p0": 1}, 2.5)]


@pytest.mark.unit
def test_execute_uses_default_timeout(fake_driver, fake_context):
    """The executor timeout applies unless a call overrides it."""
    executor = StatementExecutor(fake_context, timeout=10)

    executor.execute("SELECT 1")
    executor.execute("SELECT 2", timeout=1)

    assert [call[2] for call in fake_driver.executed] == [10, 1]


@pytest.mark.unit
def test_fetch_returns_rows(fake_driver, fake_context):
    rows = [{"id": 1}, {"id": 2}]
    fake_driver.results = [QueryResult(rows=rows, row_count=2)]

    assert StatementExecutor(fake_context).fetch("SELECT id FROM users LIMIT 15") == rows


@pytest.mark.unit
def test_fetch_single_row_is_still_a_list(fake_driver, fake_context):
    fake_driver.results = [QueryResult(rows=[{"id": 1}], row_count=1)]

    assert StatementExecutor(fake_context).fetch("SELECT id FROM users") == [{"id": 1}]


@pytest.mark.unit
def test_driver_error_is_raised_and_logged(fake_driver, fake_context, caplog):
    """Driver failures surface as DriverError with message and code."""
    fake_driver.results = [DriverError("You have an error in your SQL syntax", code=1064)]

    with caplog.at_level(logging.ERROR, logger="crud.executor"):
        with pytest.raises(DriverError) as exc_info:
            StatementExecutor(fake_context).execute("SELEC 1")

    assert exc_info.value.code == 1064
    assert "Database query failed" in caplog.text
    assert "1064" in caplog.text


@pytest.mark.unit
def test_executor_usable_after_driver_error(fake_driver, fake_context):
    """A failed statement does not poison the context."""
    fake_driver.results = [DriverError("boom"), QueryResult(rows=[{"one": 1}], row_count=1)]
    executor = StatementExecutor(fake_context)

    with pytest.raises(DriverError):
        executor.execute("BAD")
    assert executor.fetch("SELECT 1 AS one") == [{"one": 1}]


@pytest.mark.unit
def test_interrupted_statement_logged_as_warning(fake_driver, fake_context, caplog):
    fake_driver.results = [StatementInterruptedError("canceled", code="57014")]

    with caplog.at_level(logging.WARNING, logger="crud.executor"):
        with pytest.raises(StatementInterruptedError):
            StatementExecutor(fake_context).execute("SELECT pg_sleep(10)")

    assert "interrupted" in caplog.text


@pytest.mark.edge_case
def test_execute_on_closed_context(fake_context):
    fake_context.close()

    with pytest.raises(DatabaseConnectionError):
        StatementExecutor(fake_context).execute("SELECT 1")


# ============================================================================
# UNIT TESTS - normalize_rows
# ============================================================================


@pytest.mark.unit
def test_normalize_rows_default_is_identity():
    rows = [{"id": 1}]
    assert normalize_rows(rows) is rows
    assert normalize_rows([]) == []


@pytest.mark.unit
def test_normalize_rows_legacy_shape():
    """Legacy shape: one row -> dict, none -> None, many -> list."""
    assert normalize_rows([{"id": 1}], legacy=True) == {"id": 1}
    assert normalize_rows([], legacy=True) is None
    assert normalize_rows([{"id": 1}, {"id": 2}], legacy=True) == [{"id": 1}, {"id": 2}]


# ============================================================================
# UNIT TESTS - DatabaseContext
# ============================================================================


@pytest.mark.unit
def test_context_preparer_selection(fake_context):
    assert isinstance(fake_context.preparer(), LiteralPreparer)
    assert isinstance(fake_context.preparer(bind_parameters=True), BindPreparer)
    assert fake_context.preparer().handle is fake_context.handle


@pytest.mark.unit
def test_context_cancel_delegates_to_driver(fake_driver, fake_context):
    fake_context.cancel()
    assert fake_driver.cancelled is True


@pytest.mark.unit
def test_context_close_is_idempotent(fake_context):
    handle = fake_context.handle

    fake_context.close()
    fake_context.close()

    assert handle.closed is True
    assert fake_context.closed is True
    assert "closed" in repr(fake_context)


@pytest.mark.unit
def test_context_manager_closes(fake_driver, fake_context):
    handle = type(fake_context.handle)()

    with DatabaseContext(fake_driver, handle) as ctx:
        assert ctx.backend == "fake"

    assert handle.closed is True


@pytest.mark.integration
def test_session_serializes_operations(fake_driver, fake_context):
    """A second thread waits while another holds the handle."""
    executor = StatementExecutor(fake_context)
    worker = threading.Thread(target=executor.execute, args=("SELECT 1",))

    with fake_context.session():
        worker.start()
        time.sleep(0.1)
        assert fake_driver.executed == []

    worker.join(timeout=5)
    assert [call[0] for call in fake_driver.executed] == ["SELECT 1"]


@pytest.mark.integration
def test_session_is_reentrant(fake_driver, fake_context):
    """The owning thread can execute while already holding the session."""
    with fake_context.session():
        StatementExecutor(fake_context).execute("SELECT 1")

    assert len(fake_driver.executed) == 1
