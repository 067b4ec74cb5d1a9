"""Ordering keys for the version schemes found in Jira projects.

Each scheme turns a version name into a key that compares structurally.
Names that do not parse under a scheme get no key.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from rpa.semver import try_parse

__all__ = [
    "KeyFunction",
    "OrderingKey",
    "dotted_key",
    "scheme_for",
    "semantic_key",
]

OrderingKey = tuple[int, ...]
KeyFunction = Callable[[str], OrderingKey | None]

_DOTTED_RE = re.compile(r"^\d+(\.\d+){1,3}$")


def semantic_key(name: str) -> OrderingKey | None:
    version = try_parse(name)
    if version is None:
        return None
    return version.sort_key


def dotted_key(name: str) -> OrderingKey | None:
    """Key for ``1.2``, ``1.2.3`` or ``1.2.3.4``.

    Missing components rank before zero, so ``1.2 < 1.2.0 < 1.2.0.0``.
    """
    text = name.strip()
    if not _DOTTED_RE.match(text):
        return None
    parts = [int(p) for p in text.split(".")]
    return tuple(parts + [-1] * (4 - len(parts)))


def scheme_for(name: str) -> KeyFunction | None:
    """The first scheme ``name`` parses under: semantic, then dotted."""
    for key in (semantic_key, dotted_key):
        if key(name) is not None:
            return key
    return None
