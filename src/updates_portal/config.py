"""Configuration helpers and constants for the updates portal."""

from __future__ import annotations

from ..dated_updates.models import UpdateSource

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200

UPDATE_SOURCES = {
    "updates": UpdateSource(),
    "news": UpdateSource(
        update_table="news_page",
        update_name="News",
        extra_columns=("author",),
    ),
}


def resolve_update_source(name: str | None) -> UpdateSource:
    """Return the update source preset registered under ``name``."""
    key = (name or "updates").strip().lower()
    source = UPDATE_SOURCES.get(key)
    if source is None:
        known = ", ".join(sorted(UPDATE_SOURCES))
        raise ValueError(f"Unknown update source {name!r}; expected one of: {known}")
    return source
