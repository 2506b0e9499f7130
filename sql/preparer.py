"""
=====================================
Value preparation for SQL statements.
=====================================

Turns Python scalars into text that can be spliced into a statement:

- None            -> NULL
- True / False    -> 1 / 0
- int, float, Decimal and numeric strings -> the literal, unquoted
- everything else -> escaped by the driver on the live handle, then wrapped
  in single quotes

Two preparers share the same interface so that the statement builders never
need to know which mode is in use:

- BindPreparer: every value becomes a driver placeholder and is collected in
  `params`, to be passed to the executor alongside the statement text (the
  Database facade default)
- LiteralPreparer: inline escaping, the text-building fallback

Example:
    >>> from sql.preparer import LiteralPreparer, BindPreparer
    >>>
    >>> preparer = LiteralPreparer(driver, handle)
    >>> preparer.prepare_record({'name': "O'Brien", 'age': 30})
    {'name': "'O''Brien'", 'age': '30'}
    >>>
    >>> binder = BindPreparer(driver)
    >>> binder.prepare("O'Brien")
    '%(p0)s'
    >>> binder.params
    {'p0': "O'Brien"}
"""

import math
import re
from abc import ABC, abstractmethod
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, Mapping

from core.exceptions import MalformedInputError

# Same shape PHP/MySQL accept as a numeric literal, surrounding whitespace allowed
NUMERIC_PATTERN = re.compile(r'^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$')

SUPPORTED_TYPES = (str, int, float, Decimal, date, time)


def is_numeric(value: Any) -> bool:
    """Return True when a value can be embedded as an unquoted numeric literal.

    Booleans are not numeric here; they are rendered as 1/0 separately.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, (float, Decimal)):
        return math.isfinite(value)
    if isinstance(value, str):
        return NUMERIC_PATTERN.match(value) is not None
    return False


def _check_value(value: Any) -> None:
    if value is None or isinstance(value, bool):
        return
    if not isinstance(value, SUPPORTED_TYPES):
        raise MalformedInputError(
            f"Cannot use value of type {type(value).__name__} in a statement: {value!r}"
        )
    if isinstance(value, (float, Decimal)) and not math.isfinite(value):
        raise MalformedInputError(f"Non-finite number {value!r} has no SQL literal")


def _as_text(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat(sep=' ')
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


class ValuePreparer(ABC):
    """Shared interface of the two preparation modes."""

    @abstractmethod
    def prepare(self, value: Any) -> str:
        """Return the SQL text standing for one value."""

    def prepare_record(self, record: Mapping[str, Any]) -> Dict[str, str]:
        """Prepare every value of a record, keeping column order."""
        return {column: self.prepare(value) for column, value in record.items()}


class LiteralPreparer(ValuePreparer):
    """Escape values inline using the driver's connection-bound escape routine.

    Attributes:
        driver: Active Driver
        handle: Live connection handle the escaping is bound to
    """

    def __init__(self, driver, handle):
        self.driver = driver
        self.handle = handle

    def prepare(self, value: Any) -> str:
        _check_value(value)

        if value is None:
            return 'NULL'
        if isinstance(value, bool):
            return '1' if value else '0'
        if is_numeric(value):
            return value.strip() if isinstance(value, str) else str(value)

        return f"'{self.driver.escape(self.handle, _as_text(value))}'"


class BindPreparer(ValuePreparer):
    """Replace values with named placeholders and collect the bound values.

    Attributes:
        driver: Active Driver, decides the placeholder syntax and adapts values
        params: Name -> value mapping to pass to the executor
    """

    def __init__(self, driver, prefix: str = 'p'):
        self.driver = driver
        self.prefix = prefix
        self.params: Dict[str, Any] = {}

    def prepare(self, value: Any) -> str:
        _check_value(value)
        name = f"{self.prefix}{len(self.params)}"
        self.params[name] = self.driver.adapt_param(value)
        return self.driver.placeholder(name)


def prepare_value(value: Any, driver, handle) -> str:
    """Prepare a single scalar for inline SQL using a live handle."""
    return LiteralPreparer(driver, handle).prepare(value)


def prepare_record(record: Mapping[str, Any], driver, handle) -> Dict[str, str]:
    """Prepare every value of a record for inline SQL using a live handle."""
    return LiteralPreparer(driver, handle).prepare_record(record)
