"""RSS 2.0 output for a holder's updates."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable

from feedgen.feed import FeedGenerator  # pylint: disable=import-error

from ..dated_updates.models import UpdateRecord

logger = logging.getLogger(__name__)


def _aware(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def build_rss_feed(
    records: Iterable[UpdateRecord],
    *,
    title: str,
    link: str,
    entry_link: Callable[[UpdateRecord], str],
    description: str | None = None,
) -> bytes:
    """Render updates (already ordered and limited) as an RSS document."""
    fg = FeedGenerator()
    fg.title(title or "Updates")
    fg.link(href=link, rel="alternate")
    fg.description(description or title or "Updates")
    fg.language("en")
    fg.load_extension("dc")

    count = 0
    # feedgen prepends entries, so add them oldest first.
    for record in reversed(list(records)):
        url = entry_link(record)
        fe = fg.add_entry()
        fe.id(url)
        fe.guid(url, permalink=True)
        fe.title(record.title or url)
        fe.link(href=url)
        fe.description(record.abstract or record.title or url)
        author = record.extras.get("author")
        if author:
            fe.dc.dc_creator(str(author))
        published = _aware(record.date or record.created)
        if published is not None:
            fe.pubDate(published)
        count += 1
    logger.debug("rss feed built: title=%s entries=%d", title, count)
    return fg.rss_str(pretty=True)
