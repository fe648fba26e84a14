"""Derive new links by changing individual query parameters."""

from __future__ import annotations

from typing import Any, Iterable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


def _replace_param(
    pairs: list[tuple[str, str]],
    key: str,
    value: Any,
) -> list[tuple[str, str]]:
    result: list[tuple[str, str]] = []
    placed = False
    for name, current in pairs:
        if name != key:
            result.append((name, current))
            continue
        if value is None or placed:
            continue
        result.append((name, str(value)))
        placed = True
    if value is not None and not placed:
        result.append((key, str(value)))
    return result


def set_params(url: str, updates: Iterable[tuple[str, Any]]) -> str:
    """Apply ``(key, value)`` updates to a URL's query string in order.

    A ``None`` value removes every occurrence of the key; any other value
    replaces the first occurrence in place (dropping duplicates) or is
    appended. Unrelated parameters keep their order.
    """
    parts = urlsplit(url or "")
    pairs = parse_qsl(parts.query, keep_blank_values=True)
    for key, value in updates:
        pairs = _replace_param(pairs, key, value)
    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, urlencode(pairs), parts.fragment)
    )


def set_param(url: str, key: str, value: Any) -> str:
    """Return ``url`` with ``key`` set to ``value``, or removed when ``None``."""
    return set_params(url, [(key, value)])
