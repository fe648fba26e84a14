"""Tag and date-form links for the holder page.

Filters apply in this preference order: tag and date range first, then
year/month, then pagination. Choosing a tag resets month and pagination but
keeps the date range; changing the date keeps the tag.
"""

from __future__ import annotations

from typing import Iterable

from .link_state import set_params
from .models import FilterDescriptor, Tag, TagLink

_RESET_MONTH_AND_PAGING = (("month", None), ("year", None), ("start", None))


def all_tags_link(current_url: str) -> str:
    """Link that clears the tag, month and pagination but keeps dates."""
    return set_params(current_url, (("tag", None),) + _RESET_MONTH_AND_PAGING)


def tag_links(tags: Iterable[Tag], current_url: str) -> list[TagLink]:
    """Attach a filter link to each tag."""
    return [
        TagLink(
            tag=tag,
            link=set_params(current_url, (("tag", tag.id),) + _RESET_MONTH_AND_PAGING),
        )
        for tag in tags
    ]


def date_filter_link(holder_link: str, filters: FilterDescriptor) -> str:
    """Redirect target after submitting the date form."""
    from_value = filters.date_from.isoformat() if filters.date_from else None
    to_value = filters.date_to.isoformat() if filters.date_to else None
    link = set_params(holder_link, (("from", from_value), ("to", to_value)))
    if filters.tag_id is not None:
        link = set_params(link, (("tag", filters.tag_id),))
    return link


def date_reset_link(holder_link: str, filters: FilterDescriptor) -> str:
    """Redirect target after clearing the date form; only the tag survives."""
    if filters.tag_id is None:
        return holder_link
    return set_params(holder_link, (("tag", filters.tag_id),))
