"""
Shared pytest configuration and fixtures for all tests.

Key fixtures:
- fake_driver: in-memory Driver recording every statement it is given
- fake_context: DatabaseContext wired to fake_driver
- sqlite_config: DatabaseConfig whose default backend is an in-memory SQLite
- sqlite_context: open SQLite context with a `users` table
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path to enable importing project modules
# This allows tests to import from 'core', 'sql', 'crud', etc. without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.config import ConnectionConfig, DatabaseConfig  # noqa: E402
from crud.context import DatabaseContext  # noqa: E402
from drivers.base import Driver, QueryResult  # noqa: E402


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests - isolated function-level tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interactions")
    config.addinivalue_line("markers", "smoke: Smoke tests - basic functionality checks")
    config.addinivalue_line("markers", "edge_case: Edge case tests - boundary conditions")


class FakeHandle:
    """Stand-in connection handle."""
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeDriver(Driver):
    """Driver that records statements and replays queued results.

    Escapes the MySQL way: backslashes doubled, quotes backslash-escaped.
    Queued results that are exceptions are raised instead of returned.
    """

    name = 'fake'
    error_class = RuntimeError

    def __init__(self, results=None):
        self.executed = []
        self.results = list(results or [])
        self.insert_id = 42
        self.cancelled = False

    def connect(self, config):
        return FakeHandle()

    def escape(self, handle, raw):
        self.ensure_handle(handle)
        return raw.replace('\\', '\\\\').replace("'", "\\'")

    def last_insert_id(self, handle):
        return self.insert_id

    def cancel(self, handle, config=None):
        self.cancelled = True

    def execute(self, handle, statement, params=None, timeout=None):
        self.ensure_handle(handle)
        self.executed.append((statement, params, timeout))
        if self.results:
            result = self.results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result
        return QueryResult()


@pytest.fixture
def fake_driver():
    return FakeDriver()


@pytest.fixture
def fake_context(fake_driver):
    return DatabaseContext(fake_driver, FakeHandle(), backend='fake')


@pytest.fixture
def sqlite_config():
    return DatabaseConfig(
        default='sqlite',
        connections={'sqlite': ConnectionConfig(host='', database=':memory:')}
    )


@pytest.fixture
def sqlite_context(sqlite_config):
    ctx = DatabaseContext.open(sqlite_config)
    ctx.handle.execute(
        "CREATE TABLE users ("
        "id INTEGER PRIMARY KEY AUTOINCREMENT, "
        "name TEXT, "
        "age INTEGER, "
        "deleted_at TEXT)"
    )
    yield ctx
    ctx.close()
