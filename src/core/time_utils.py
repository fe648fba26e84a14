"""Shared date parsing and range helpers."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional
from urllib.parse import unquote_plus

from dateutil.parser import isoparse  # pylint: disable=import-error
from dateutil.relativedelta import relativedelta  # pylint: disable=import-error

DAY_END = time(23, 59, 59)


def parse_date(value: Any) -> Optional[date]:
    """Parse a query-string date into a calendar date.

    Accepts ``YYYY-MM-DD`` and any ISO-8601 datetime (truncated to its date).
    URL-encoded input is decoded first. Anything else yields ``None``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = unquote_plus(str(value)).strip()
    if not raw:
        return None
    try:
        return isoparse(raw).date()
    except (TypeError, ValueError, OverflowError):
        return None


def day_range(start: date, end: Optional[date] = None) -> tuple[datetime, datetime]:
    """Return inclusive ``[start 00:00:00, end 23:59:59]`` bounds.

    A missing ``end`` means the single day ``start``.
    """
    last = end if end is not None else start
    return datetime.combine(start, time.min), datetime.combine(last, DAY_END)


def month_range(year: int, month: int) -> tuple[datetime, Optional[datetime]]:
    """Return half-open ``[first of month, first of next month)`` bounds.

    The upper bound is ``None`` for December of the last representable year.
    """
    begin = datetime(year, month, 1)
    try:
        return begin, begin + relativedelta(months=1)
    except (ValueError, OverflowError):
        return begin, None


def naive(value: Optional[datetime]) -> Optional[datetime]:
    """Drop tzinfo so stored timestamps compare with naive range bounds."""
    if value is None:
        return None
    return value.replace(tzinfo=None) if value.tzinfo else value
