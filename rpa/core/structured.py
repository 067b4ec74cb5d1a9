"""Narrowing helpers for untyped TOML and JSON payloads.

Configuration files and Jira REST responses both arrive as plain ``object``
trees. These helpers validate shape at the boundary so the rest of the code
works with typed values.
"""

from __future__ import annotations

from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict whose keys are all strings."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def as_obj_list(obj: object) -> ObjList | None:
    if isinstance(obj, list):
        return cast(ObjList, obj)
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a stripped, non-empty string value or None."""
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_bool(table: Mapping[str, object], key: str, default: bool = False) -> bool:
    value = table.get(key)
    if isinstance(value, bool):
        return value
    return default


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    """Get a nested table (dict with string keys) from a mapping."""
    return as_str_dict(table.get(key))


def get_list(table: Mapping[str, object], key: str) -> ObjList | None:
    return as_obj_list(table.get(key))


def get_str_list(table: Mapping[str, object], key: str) -> list[str] | None:
    """Get a list of strings, or None if the key is missing or mistyped.

    Entries are kept verbatim (empty strings included) so callers can decide
    how to treat blanks.
    """
    items = get_list(table, key)
    if items is None:
        return None
    if not all(isinstance(item, str) for item in items):
        return None
    return [cast(str, item) for item in items]


def get_table_list(table: Mapping[str, object], key: str) -> list[StrDict] | None:
    """Get an array of tables (``[[section]]`` in TOML)."""
    items = get_list(table, key)
    if items is None:
        return None
    out: list[StrDict] = []
    for item in items:
        d = as_str_dict(item)
        if d is None:
            return None
        out.append(d)
    return out
