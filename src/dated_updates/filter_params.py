"""Parse request parameters into a canonical update filter."""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from src.core.number_utils import coerce_bounded_int, coerce_int
from src.core.time_utils import parse_date

from .models import (
    NOTICE_REVERSED_DATES,
    NOTICE_SINGLE_DATE,
    FilterDescriptor,
    Notice,
)

FILTER_KEYS = ("tag", "from", "to", "year", "month")


def _clean_param(raw: Any) -> str | None:
    """Normalize a raw query value, treating blanks as absent."""
    if raw is None:
        return None
    value = str(raw).strip()
    if not value:
        return None
    return value


def _parse_year(raw: str | None) -> int | None:
    return coerce_bounded_int(raw, 1, 9999)


def _parse_month(raw: str | None) -> int | None:
    return coerce_bounded_int(raw, 1, 12)


def _normalize_dates(
    date_from: date | None,
    date_to: date | None,
) -> tuple[date | None, date | None, list[Notice]]:
    notices: list[Notice] = []
    if date_to is not None and date_from is None:
        date_from, date_to = date_to, None
    if date_from is not None and date_to is not None and date_from > date_to:
        date_from, date_to = date_to, date_from
        notices.append(Notice(NOTICE_REVERSED_DATES))
    if date_from is not None and date_to is None:
        notices.append(Notice(NOTICE_SINGLE_DATE))
    return date_from, date_to, notices


def parse_filter_params(args: Mapping[str, Any]) -> tuple[FilterDescriptor, list[Notice]]:
    """Parse tag/date/month query parameters.

    Malformed values are treated as absent. A lone ``to`` date becomes a
    single-date filter on ``from`` and a reversed range is swapped; both are
    reported as notices for the caller to surface.
    """
    values = {key: _clean_param(args.get(key)) for key in FILTER_KEYS}
    date_from, date_to, notices = _normalize_dates(
        parse_date(values["from"]),
        parse_date(values["to"]),
    )
    descriptor = FilterDescriptor(
        tag_id=coerce_int(values["tag"]),
        date_from=date_from,
        date_to=date_to,
        year=_parse_year(values["year"]),
        month=_parse_month(values["month"]),
    )
    return descriptor, notices


def filter_query_params(filters: FilterDescriptor) -> dict[str, Any]:
    """Serialize filters back to their query parameter form."""
    params: dict[str, Any] = {}
    if filters.tag_id is not None:
        params["tag"] = filters.tag_id
    if filters.date_from is not None:
        params["from"] = filters.date_from.isoformat()
    if filters.date_to is not None:
        params["to"] = filters.date_to.isoformat()
    if filters.has_month:
        params["year"] = filters.year
        params["month"] = filters.month
    return params
