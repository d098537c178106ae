"""Utility functions for SwaggerDiff."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Optional


def is_blank(value: Optional[str]) -> bool:
    """Check if a string is None, empty or whitespace only."""
    return value is None or not str(value).strip()


def is_empty(collection: Any) -> bool:
    """Null-or-empty check used by every key-set comparison."""
    return collection is None or len(collection) == 0


def remove_keys(mapping: Optional[dict], keys_to_exclude: Iterable) -> dict:
    """
    Return a copy of ``mapping`` without ``keys_to_exclude``.

    The input mapping is never modified.
    """
    if not mapping:
        return {}
    excluded = set(keys_to_exclude or ())
    return {k: v for k, v in mapping.items() if k not in excluded}


def prefix_paths(paths: Optional[dict], prefix: Optional[str]) -> dict:
    """
    Rewrite every path key to ``prefix + key``.

    A blank prefix leaves the keys untouched.
    """
    if not paths:
        return {}
    if is_blank(prefix):
        return dict(paths)
    return {f"{prefix}{key}": value for key, value in paths.items()}


def filter_ignored_properties(
    definition_name: str,
    properties: Optional[dict],
    ignored: Iterable[str]
) -> dict:
    """Drop properties listed as ``"<definition>.<property>"`` in ``ignored``."""
    if not properties:
        return {}
    ignored = set(ignored or ())
    return {
        name: prop for name, prop in properties.items()
        if f"{definition_name}.{name}" not in ignored
    }


def key_set_difference(actual_keys: Iterable, expected_keys: Iterable) -> tuple[list, list]:
    """
    Compare two key collections as sets.

    Returns:
        Tuple of (missing_in_actual, extra_in_actual), each sorted for stable output
    """
    actual_set = set(actual_keys)
    expected_set = set(expected_keys)
    missing = sorted(expected_set - actual_set, key=str)
    extra = sorted(actual_set - expected_set, key=str)
    return missing, extra


def describe_key_difference(missing: list, extra: list) -> str:
    """Human readable summary of a key-set divergence."""
    parts = []
    if missing:
        parts.append("missing " + ", ".join(f"'{format_key(k)}'" for k in missing))
    if extra:
        parts.append("unexpected " + ", ".join(f"'{format_key(k)}'" for k in extra))
    return "; ".join(parts)


def format_key(key: Any) -> str:
    if isinstance(key, Enum):
        return key.name
    return str(key)


def kind_name(node: Any) -> str:
    """Friendly name of a node's variant kind, or ``null`` for a missing node."""
    if node is None:
        return "null"
    kind = getattr(node, "kind", None)
    if kind is None:
        return type(node).__name__
    return kind.name
