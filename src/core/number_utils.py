"""Numeric parsing helpers shared across modules."""

from __future__ import annotations

from typing import Any


def coerce_int(value: Any) -> int | None:
    """Parse an int-like value, returning None on failure."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    raw = str(value).strip()
    if not raw:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def coerce_bounded_int(value: Any, minimum: int, maximum: int) -> int | None:
    """Parse an int-like value and drop it when it falls outside the bounds."""
    parsed = coerce_int(value)
    if parsed is None or parsed < minimum or parsed > maximum:
        return None
    return parsed
