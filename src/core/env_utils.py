"""Environment variable parsing that never raises on malformed values."""

from __future__ import annotations

import os
from typing import Optional

from .number_utils import coerce_int

TRUTHY = frozenset({"1", "true", "t", "yes", "y", "on"})


def _env_raw(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return None
    return raw.strip() or None


def parse_bool(raw: str | None, default: bool = False) -> bool:
    """Parse a boolean-ish string value."""
    if raw is None:
        return default
    return raw.strip().lower() in TRUTHY


def env_bool(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable."""
    return parse_bool(os.getenv(name), default)


def env_str(name: str, default: str) -> str:
    """Read a stripped string environment variable, falling back when blank."""
    return _env_raw(name) or default


def env_int(name: str, default: int, minimum: Optional[int] = None) -> int:
    """Read an integer environment variable, raising it to ``minimum``."""
    value = coerce_int(_env_raw(name))
    if value is None:
        value = default
    if minimum is not None and value < minimum:
        return minimum
    return value


def env_positive_int(name: str, default: int) -> int:
    """Read a positive integer; zero, negative or malformed values give ``default``."""
    value = coerce_int(_env_raw(name))
    if value is None or value < 1:
        return default
    return value


def env_positive_float(name: str) -> Optional[float]:
    """Read a positive float, or None when unset, malformed or not above zero."""
    raw = _env_raw(name)
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None
