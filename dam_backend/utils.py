"""
Small coercion helpers for env flags and wire payloads.
"""
from __future__ import annotations

import os
from typing import Any, Iterable

BOOL_TRUE_VALUES = frozenset({"1", "true", "yes", "on", "enabled"})
BOOL_FALSE_VALUES = frozenset({"0", "false", "no", "off", "disabled"})


def parse_bool(value: Any, default: bool = False) -> bool:
    """Loose boolean from JSON bodies and env vars ("yes", 1, "off", ...)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if not isinstance(value, str):
        return default
    normalized = value.strip().lower()
    if normalized in BOOL_TRUE_VALUES:
        return True
    if normalized in BOOL_FALSE_VALUES:
        return False
    try:
        return bool(float(normalized))
    except ValueError:
        return default


def env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name) if name else None
    return default if raw is None else parse_bool(raw, default)


def normalize_ids(values: Iterable[Any]) -> list[str]:
    """
    Entity ids as stripped strings, blanks dropped, first occurrence kept.

    Raises ValueError for anything that is not a string or an integer
    (booleans included, since `True` would otherwise become "True").
    """
    out: dict[str, None] = {}
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise ValueError(f"Invalid entity id: {value!r}")
        text = str(value).strip()
        if text:
            out.setdefault(text, None)
    return list(out)
