"""Group dated updates into year/month navigation buckets."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from .link_state import set_params
from .models import MonthBucket, MonthEntry, UpdateRecord


def _month_link(base_link: str, year: int, month: int, active: bool) -> str:
    if active:
        updates = [("month", None), ("year", None)]
    else:
        updates = [("month", month), ("year", year)]
    # Month navigation always resets pagination.
    updates.append(("start", None))
    return set_params(base_link, updates)


def _record_date(record: UpdateRecord) -> date | None:
    value = record.date
    if value is None or not isinstance(value, date):
        return None
    return value


def extract_months(
    records: Iterable[UpdateRecord],
    base_link: str,
    active_year: int | None = None,
    active_month: int | None = None,
) -> list[MonthBucket]:
    """Build month buckets from updates sorted ascending by date.

    Buckets come back most-recent year first. Inside a year, months keep the
    order they were first seen in; a repeated month replaces the earlier
    entry in place.
    """
    years: dict[int, dict[int, MonthEntry]] = {}
    for record in records:
        when = _record_date(record)
        if when is None:
            continue
        year, month = when.year, when.month
        months = years.setdefault(year, {})
        active = active_year == year and active_month == month
        months[month] = MonthEntry(
            month_number=month,
            month_name=when.strftime("%b"),
            link=_month_link(base_link, year, month, active),
            active=active,
        )
    return [
        MonthBucket(year=year, months=tuple(months.values()))
        for year, months in reversed(list(years.items()))
    ]
