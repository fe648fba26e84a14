"""Database helpers for the updates portal."""

from __future__ import annotations

import logging
import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

import psycopg  # pylint: disable=import-error
from psycopg.rows import dict_row  # pylint: disable=import-error
from psycopg_pool import ConnectionPool, PoolTimeout  # pylint: disable=import-error

from ..dated_updates.models import Tag, UpdateRecord, UpdateSource
from ..dated_updates.query_builder import (
    RecordIdClause,
    UpdateQuery,
    build_tag_list_query,
)
from ..core.env_utils import env_bool, env_int, env_positive_int
from .db_timing import timed_cursor

logger = logging.getLogger(__name__)

_DB_POOL: ConnectionPool | None = None
_DB_POOL_LOCK = threading.Lock()


@dataclass(frozen=True)
class Holder:
    """The page grouping a set of dated updates."""

    id: int
    title: str
    url_segment: str | None = None


def _db_pool_enabled() -> bool:
    return env_bool("UPDATES_DB_POOL_ENABLE", False)


def _db_pool_sizes() -> tuple[int, int]:
    min_size = env_int("UPDATES_DB_POOL_MIN", 1, minimum=0)
    max_size = env_int("UPDATES_DB_POOL_MAX", 4, minimum=1)
    return min_size, max(max_size, min_size)


def _get_db_pool(db_url: str) -> ConnectionPool | None:
    global _DB_POOL  # pylint: disable=global-statement
    if not _db_pool_enabled():
        return None
    if _DB_POOL is not None:
        return _DB_POOL
    with _DB_POOL_LOCK:
        if _DB_POOL is None:
            min_size, max_size = _db_pool_sizes()
            _DB_POOL = ConnectionPool(
                db_url,
                min_size=min_size,
                max_size=max_size,
                timeout=float(env_positive_int("UPDATES_DB_POOL_TIMEOUT", 3)),
                open=True,
            )
            logger.info("DB pool opened: min=%d max=%d", min_size, max_size)
    return _DB_POOL


@contextmanager
def _pool_connection(pool: ConnectionPool):
    try:
        with pool.connection() as conn:
            yield conn
    except PoolTimeout as exc:
        raise RuntimeError("Database connection pool exhausted; try again shortly.") from exc


@contextmanager
def _direct_connection(db_url: str, connect_timeout: int | None):
    connect_kwargs: dict[str, Any] = {}
    if connect_timeout is not None:
        connect_kwargs["connect_timeout"] = connect_timeout
    conn = psycopg.connect(db_url, **connect_kwargs)
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def _db_connection(connect_timeout: int | None = None):
    """Yield a read-only-use connection from the pool or a direct connect."""
    db_url = os.getenv("DATABASE_URL")
    if not db_url:
        raise RuntimeError("DATABASE_URL is not set.")
    pool = _get_db_pool(db_url)
    if pool is not None:
        with _pool_connection(pool) as conn:
            yield conn
        return
    with _direct_connection(db_url, connect_timeout) as conn:
        yield conn


def _fetch_all(conn: psycopg.Connection, sql: str, params: list[Any]) -> list[dict[str, Any]]:
    with timed_cursor(conn, row_factory=dict_row) as cur:
        cur.execute(sql, params)
        return list(cur.fetchall())


def _fetch_one(conn: psycopg.Connection, sql: str, params: list[Any]) -> dict[str, Any] | None:
    with timed_cursor(conn, row_factory=dict_row) as cur:
        cur.execute(sql, params)
        return cur.fetchone()


def fetch_holder(conn: psycopg.Connection, source: UpdateSource, holder_id: int) -> Holder | None:
    """Load a holder page by id."""
    row = _fetch_one(
        conn,
        f"SELECT id, title, url_segment FROM {source.holder_table} WHERE id = %s",
        [holder_id],
    )
    if row is None:
        return None
    return Holder(id=row["id"], title=row.get("title") or "", url_segment=row.get("url_segment"))


def fetch_updates(
    conn: psycopg.Connection,
    query: UpdateQuery,
    order: str,
    *,
    limit: int | None = None,
    offset: int = 0,
) -> list[UpdateRecord]:
    """Run an update query and return the matching records."""
    sql, params = query.select_sql(order, limit=limit, offset=offset)
    rows = _fetch_all(conn, sql, params)
    extra_columns = query.source.extra_columns
    return [UpdateRecord.from_row(row, extra_columns) for row in rows]


def fetch_update(conn: psycopg.Connection, query: UpdateQuery, update_id: int) -> UpdateRecord | None:
    """Load one update matching ``query``."""
    records = fetch_updates(conn, query.with_clause(RecordIdClause(update_id)), "date_desc", limit=1)
    return records[0] if records else None


def count_updates(conn: psycopg.Connection, query: UpdateQuery) -> int:
    """Count the records an update query matches."""
    sql, params = query.count_sql()
    row = _fetch_one(conn, sql, params)
    if not row:
        return 0
    return int(row.get("total") or 0)


def fetch_update_tags(conn: psycopg.Connection, source: UpdateSource, parent_id: int) -> list[Tag]:
    """Distinct tags used by updates under a holder, sorted by name."""
    sql, params = build_tag_list_query(source, parent_id)
    return [Tag(id=row["id"], name=row["name"]) for row in _fetch_all(conn, sql, params)]


def fetch_tag(conn: psycopg.Connection, source: UpdateSource, tag_id: int) -> Tag | None:
    """Load a single taxonomy term."""
    row = _fetch_one(
        conn,
        f"SELECT id, name FROM {source.term_table} WHERE id = %s",
        [tag_id],
    )
    if row is None:
        return None
    return Tag(id=row["id"], name=row["name"])


def ensure_tables_present(conn: psycopg.Connection, source: UpdateSource) -> None:
    """Raise RuntimeError when a table the source reads from is missing."""
    tables = (source.update_table, source.join_table, source.term_table, source.holder_table)
    missing: list[str] = []
    for table in tables:
        row = _fetch_one(conn, "SELECT to_regclass(%s) AS name", [table])
        if not row or row.get("name") is None:
            missing.append(table)
    if missing:
        raise RuntimeError(f"Missing record store tables: {', '.join(missing)}")
    logger.info("record store tables present: %s", ", ".join(tables))
