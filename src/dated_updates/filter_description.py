"""Human-readable summaries of the active update filters."""

from __future__ import annotations

import calendar
from datetime import date
from typing import Callable

from .models import FilterDescriptor


def fmt_filter_date(value: date) -> str:
    """Format a date as day/zero-padded month/year, e.g. ``5/03/2021``."""
    return f"{value.day}/{value.month:02d}/{value.year}"


def describe_filters(
    filters: FilterDescriptor,
    tag_name_lookup: Callable[[int], str | None],
    update_label: str,
) -> str | None:
    """Describe the filters, e.g. ``News within "Health" on 1/05/2020``.

    Returns None when no filter contributes a fragment.
    """
    fragments: list[str] = []
    if filters.tag_id is not None:
        name = tag_name_lookup(filters.tag_id)
        if name:
            fragments.append(f'within "{name}"')

    if filters.date_from is not None and filters.date_to is not None:
        fragments.append(
            f"between {fmt_filter_date(filters.date_from)} "
            f"and {fmt_filter_date(filters.date_to)}"
        )
    elif filters.has_date:
        single = filters.date_from or filters.date_to
        fragments.append(f"on {fmt_filter_date(single)}")

    if filters.has_month:
        fragments.append(f"in {calendar.month_name[filters.month]} {filters.year}")

    if not fragments:
        return None
    return f"{update_label} " + " ".join(fragments)
