"""Compose parameterized update queries from canonical filters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from src.core.time_utils import day_range, month_range, naive

from .models import FilterDescriptor, UpdateRecord, UpdateSource

UPDATE_ORDER_SQL = {
    "date_asc": "u.date ASC, u.id ASC",
    "date_desc": "u.date DESC, u.id DESC",
    "created_desc": "u.created DESC, u.id DESC",
}
UPDATE_BASE_COLUMNS = (
    "id",
    "parent_id",
    "title",
    "url_segment",
    "date",
    "created",
    "abstract",
)


@dataclass(frozen=True)
class ParentClause:
    """Restrict updates to a single holder."""

    parent_id: Any

    def to_sql(self, source: UpdateSource) -> tuple[str, list[Any]]:
        return "u.parent_id = %s", [self.parent_id]

    def matches(self, record: UpdateRecord) -> bool:
        return record.parent_id == self.parent_id


@dataclass(frozen=True)
class RecordIdClause:
    """Restrict the query to one update."""

    record_id: int

    def to_sql(self, source: UpdateSource) -> tuple[str, list[Any]]:
        return "u.id = %s", [self.record_id]

    def matches(self, record: UpdateRecord) -> bool:
        return record.id == self.record_id


@dataclass(frozen=True)
class TagClause:
    """Restrict updates to those tagged with a taxonomy term."""

    tag_id: int

    def to_sql(self, source: UpdateSource) -> tuple[str, list[Any]]:
        fragment = (
            f"EXISTS (SELECT 1 FROM {source.join_table} pt "
            f"JOIN {source.term_table} tt ON tt.id = pt.taxonomy_term_id "
            "WHERE pt.page_id = u.id AND tt.id = %s)"
        )
        return fragment, [self.tag_id]

    def matches(self, record: UpdateRecord) -> bool:
        return self.tag_id in record.tag_ids


@dataclass(frozen=True)
class DateRangeClause:
    """Restrict updates to a date window.

    The lower bound is always inclusive; ``inclusive_end`` selects between
    ``<=`` (day ranges) and ``<`` (month windows) for the upper bound.
    A ``None`` end leaves the window open above.
    """

    start: datetime
    end: Optional[datetime]
    inclusive_end: bool = True

    def to_sql(self, source: UpdateSource) -> tuple[str, list[Any]]:
        if self.end is None:
            return "(u.date >= %s)", [self.start]
        upper = "<=" if self.inclusive_end else "<"
        return f"(u.date >= %s AND u.date {upper} %s)", [self.start, self.end]

    def matches(self, record: UpdateRecord) -> bool:
        value = naive(record.date)
        if value is None:
            return False
        if value < self.start:
            return False
        if self.end is None:
            return True
        return value <= self.end if self.inclusive_end else value < self.end


@dataclass(frozen=True)
class UpdateQuery:
    """A conjunction of update clauses against one update source."""

    source: UpdateSource
    clauses: tuple[Any, ...] = ()

    def where_sql(self) -> tuple[str, list[Any]]:
        """Return the WHERE clause (empty when unfiltered) and its params."""
        fragments: list[str] = []
        params: list[Any] = []
        for clause in self.clauses:
            fragment, clause_params = clause.to_sql(self.source)
            fragments.append(fragment)
            params.extend(clause_params)
        if not fragments:
            return "", params
        return " WHERE " + " AND ".join(fragments), params

    def matches(self, record: UpdateRecord) -> bool:
        """Evaluate the query against an in-memory record."""
        return all(clause.matches(record) for clause in self.clauses)

    def with_clause(self, clause: Any) -> "UpdateQuery":
        """Return a copy with one more clause ANDed in."""
        return UpdateQuery(source=self.source, clauses=self.clauses + (clause,))

    def _columns_sql(self) -> str:
        columns = [f"u.{name}" for name in UPDATE_BASE_COLUMNS + self.source.extra_columns]
        columns.append(
            f"ARRAY(SELECT pt.taxonomy_term_id FROM {self.source.join_table} pt "
            "WHERE pt.page_id = u.id ORDER BY pt.taxonomy_term_id) AS tag_ids"
        )
        return ", ".join(columns)

    def select_sql(
        self,
        order: str | None = None,
        *,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[str, list[Any]]:
        """Render a SELECT for this query with optional ordering and paging."""
        where, params = self.where_sql()
        sql = f"SELECT {self._columns_sql()} FROM {self.source.update_table} u{where}"
        if order is not None:
            order_sql = UPDATE_ORDER_SQL.get(order)
            if order_sql is None:
                raise ValueError(f"Unknown update order: {order!r}")
            sql += f" ORDER BY {order_sql}"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(max(0, int(limit)))
        if offset:
            sql += " OFFSET %s"
            params.append(max(0, int(offset)))
        return sql, params

    def count_sql(self) -> tuple[str, list[Any]]:
        """Render a COUNT(*) for this query."""
        where, params = self.where_sql()
        return f"SELECT COUNT(*) AS total FROM {self.source.update_table} u{where}", params


def build_update_query(
    source: UpdateSource,
    parent_id: Any,
    filters: FilterDescriptor,
) -> UpdateQuery:
    """Build the clauses for the given holder and filters.

    Absent filters add no clause; present ones are ANDed. The query carries
    no ordering of its own.
    """
    clauses: list[Any] = []
    if parent_id is not None:
        clauses.append(ParentClause(parent_id))
    if filters.tag_id is not None:
        clauses.append(TagClause(filters.tag_id))
    date_from = filters.date_from if filters.date_from is not None else filters.date_to
    if date_from is not None:
        date_to = filters.date_to if filters.date_from is not None else None
        start, end = day_range(date_from, date_to)
        clauses.append(DateRangeClause(start, end, inclusive_end=True))
    if filters.has_month:
        begin, end = month_range(filters.year, filters.month)
        clauses.append(DateRangeClause(begin, end, inclusive_end=False))
    return UpdateQuery(source=source, clauses=tuple(clauses))


def build_tag_list_query(source: UpdateSource, parent_id: Any) -> tuple[str, list[Any]]:
    """Render the distinct taxonomy terms used by updates under a holder."""
    sql = (
        f"SELECT DISTINCT tt.id, tt.name FROM {source.term_table} tt "
        f"JOIN {source.join_table} pt ON pt.taxonomy_term_id = tt.id "
        f"JOIN {source.update_table} u ON u.id = pt.page_id "
        "WHERE u.parent_id = %s ORDER BY tt.name, tt.id"
    )
    return sql, [parent_id]
