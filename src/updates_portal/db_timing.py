"""Per-request database timing for the updates portal."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from flask import g, has_request_context  # pylint: disable=import-error

from ..core.env_utils import env_positive_float

logger = logging.getLogger(__name__)

SLOW_QUERY_ENV = "UPDATES_PORTAL_DB_SLOW_QUERY_MS"
_SNIPPET_LIMIT = 300


@dataclass
class DbMetrics:
    """Running DB totals for one request."""

    total_ms: float = 0.0
    queries: int = 0

    def record(self, elapsed_ms: float) -> None:
        """Add one executed query."""
        self.total_ms += elapsed_ms
        self.queries += 1


def _current_metrics() -> Optional[DbMetrics]:
    if not has_request_context():
        return None
    metrics = g.get("db_metrics")
    if metrics is None:
        metrics = DbMetrics()
        g.db_metrics = metrics
    return metrics


def reset_db_metrics() -> None:
    """Start fresh totals for the current request."""
    if has_request_context():
        g.db_metrics = DbMetrics()


def get_db_metrics() -> tuple[float, int]:
    """Return (DB time in ms, query count) for the current request."""
    metrics = _current_metrics()
    if metrics is None:
        return 0.0, 0
    return metrics.total_ms, metrics.queries


def _log_slow_query(query: Any, params: Any, elapsed_ms: float) -> None:
    snippet = " ".join(str(query).split())
    if len(snippet) > _SNIPPET_LIMIT:
        snippet = snippet[:_SNIPPET_LIMIT] + "..."
    param_count = len(params) if params is not None else 0
    logger.warning(
        "slow DB query: elapsed_ms=%.1f params=%d sql=%s",
        elapsed_ms,
        param_count,
        snippet,
    )


class TimedCursor:
    """Cursor wrapper that times ``execute`` and delegates everything else."""

    def __init__(self, cursor, slow_ms: Optional[float]) -> None:
        self._cursor = cursor
        self._slow_ms = slow_ms

    def execute(self, query: Any, params: Any = None):
        """Execute ``query`` and record its wall time."""
        start = time.perf_counter()
        try:
            return self._cursor.execute(query, params)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            metrics = _current_metrics()
            if metrics is not None:
                metrics.record(elapsed_ms)
            if self._slow_ms is not None and elapsed_ms >= self._slow_ms:
                _log_slow_query(query, params, elapsed_ms)

    def __getattr__(self, name: str):
        return getattr(self._cursor, name)


@contextmanager
def timed_cursor(conn, **kwargs) -> Iterator[TimedCursor]:
    """Open a cursor on ``conn`` wrapped in :class:`TimedCursor`."""
    with conn.cursor(**kwargs) as cursor:
        yield TimedCursor(cursor, env_positive_float(SLOW_QUERY_ENV))
