"""Whitelist filtering of input records."""

from typing import Any, Dict, Iterable, Mapping


def fillables(data: Mapping[str, Any], fillable_fields: Iterable[str] = ()) -> Dict[str, Any]:
    """
    Keep only the entries of `data` whose key is a permitted column.

    Entries keep the order they have in `data`; keys that are not permitted
    are dropped silently.

    Example:
        >>> fillables({'name': 'Ada', 'age': 30, 'is_admin': 1}, ['name', 'age'])
        {'name': 'Ada', 'age': 30}
    """
    permitted = set(fillable_fields)
    return {key: value for key, value in data.items() if key in permitted}
