"""Value types shared by the dated update filters, queries and navigation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

NOTICE_SINGLE_DATE = "single_date"
NOTICE_REVERSED_DATES = "reversed_dates"

NOTICE_MESSAGES = {
    NOTICE_SINGLE_DATE: "Filtered by a single date.",
    NOTICE_REVERSED_DATES: "Filter has been applied with the dates reversed.",
}


@dataclass(frozen=True)
class Notice:
    """Advisory message about a normalization applied to the filters."""

    kind: str

    @property
    def message(self) -> str:
        """Return the user-facing text for this notice."""
        return NOTICE_MESSAGES.get(self.kind, self.kind)


@dataclass(frozen=True)
class FilterDescriptor:
    """Canonical filter values parsed from request parameters."""

    tag_id: int | None = None
    date_from: date | None = None
    date_to: date | None = None
    year: int | None = None
    month: int | None = None

    @property
    def has_date(self) -> bool:
        """Return True when a single date or date range is selected."""
        return self.date_from is not None or self.date_to is not None

    @property
    def has_month(self) -> bool:
        """Return True when both year and month are selected."""
        return self.year is not None and self.month is not None

    def without_month(self) -> "FilterDescriptor":
        """Return a copy with the year/month filter cleared."""
        return FilterDescriptor(
            tag_id=self.tag_id,
            date_from=self.date_from,
            date_to=self.date_to,
        )


@dataclass(frozen=True)
class UpdateSource:
    """Tables and labels describing one kind of dated update.

    :ivar update_table: Table holding the update rows.
    :ivar join_table: Many-to-many table between updates and taxonomy terms.
    :ivar term_table: Taxonomy term table.
    :ivar holder_table: Table holding the holder pages.
    :ivar update_name: Display label for the updates (e.g. "News").
    :ivar extra_columns: Additional update columns to select.
    """

    update_table: str = "dated_update_page"
    join_table: str = "page_tags"
    term_table: str = "taxonomy_term"
    holder_table: str = "site_tree"
    update_name: str = "Updates"
    extra_columns: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        names = [self.update_table, self.join_table, self.term_table, self.holder_table]
        names.extend(self.extra_columns)
        for name in names:
            if not _IDENTIFIER_RE.match(name or ""):
                raise ValueError(f"Invalid SQL identifier: {name!r}")


@dataclass(frozen=True)
class UpdateRecord:
    """A single dated update row read from the record store."""

    id: int
    parent_id: int | None
    date: datetime | None
    created: datetime | None = None
    tag_ids: frozenset[int] = frozenset()
    title: str = ""
    url_segment: str | None = None
    abstract: str | None = None
    extras: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_row(cls, row: dict[str, Any], extra_columns: tuple[str, ...] = ()) -> "UpdateRecord":
        """Build a record from a dict row returned by the database."""
        tag_ids = row.get("tag_ids") or ()
        return cls(
            id=row["id"],
            parent_id=row.get("parent_id"),
            date=row.get("date"),
            created=row.get("created"),
            tag_ids=frozenset(int(tag) for tag in tag_ids),
            title=row.get("title") or "",
            url_segment=row.get("url_segment"),
            abstract=row.get("abstract"),
            extras={name: row.get(name) for name in extra_columns},
        )


@dataclass(frozen=True)
class Tag:
    """Taxonomy term attached to updates."""

    id: int
    name: str


@dataclass(frozen=True)
class TagLink:
    """Taxonomy term paired with its filter link."""

    tag: Tag
    link: str


@dataclass(frozen=True)
class MonthEntry:
    """One month link inside a year bucket."""

    month_number: int
    month_name: str
    link: str
    active: bool


@dataclass(frozen=True)
class MonthBucket:
    """Months with updates for a single year."""

    year: int
    months: tuple[MonthEntry, ...]
