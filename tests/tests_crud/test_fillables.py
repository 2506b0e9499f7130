"""
Test suite for crud.fillables.
"""

import pytest

from crud.fillables import fillables


@pytest.mark.smoke
def test_fillables_drops_unlisted_fields():
    """{name, age, secret} filtered by {name, age} keeps name and age."""
    data = {"name": "Ada", "age": 30, "secret": "hunter2"}

    assert fillables(data, ["name", "age"]) == {"name": "Ada", "age": 30}


@pytest.mark.unit
def test_fillables_preserves_input_order():
    """Order follows the input record, not the whitelist."""
    data = {"b": 2, "secret": 0, "a": 1, "c": 3}

    assert list(fillables(data, ["c", "a", "b"])) == ["b", "a", "c"]


@pytest.mark.unit
def test_fillables_returns_new_dict():
    data = {"name": "Ada"}
    result = fillables(data, {"name"})

    assert result == data
    assert result is not data


@pytest.mark.edge_case
def test_fillables_absent_and_empty():
    """Permitted fields missing from data are ignored; no whitelist keeps nothing."""
    assert fillables({"name": "Ada"}, ["name", "email"]) == {"name": "Ada"}
    assert fillables({"name": "Ada"}) == {}
    assert fillables({}, ["name"]) == {}
