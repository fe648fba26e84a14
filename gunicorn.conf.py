"""Gunicorn configuration for the updates portal.

Run with ``gunicorn -c gunicorn.conf.py "src.updates_portal.app:create_app()"``.
Every setting can be overridden with an ``UPDATES_PORTAL_*`` variable.
"""

from __future__ import annotations

import os


def _positive_int(name: str, default: int) -> int:
    try:
        value = int(os.getenv(name) or default)
    except ValueError:
        return default
    return value if value > 0 else default


def _bind() -> str | None:
    explicit = os.getenv("UPDATES_PORTAL_BIND")
    if explicit:
        return explicit
    host = os.getenv("UPDATES_PORTAL_HOST")
    port = os.getenv("UPDATES_PORTAL_PORT")
    if not (host or port):
        return None
    return f"{host or '0.0.0.0'}:{port or '8000'}"


workers = _positive_int("UPDATES_PORTAL_WORKERS", 2)
worker_class = os.getenv("UPDATES_PORTAL_WORKER_CLASS") or "gthread"
threads = _positive_int("UPDATES_PORTAL_THREADS", 4)
timeout = _positive_int("UPDATES_PORTAL_TIMEOUT", 30)
keepalive = _positive_int("UPDATES_PORTAL_KEEPALIVE", 5)
accesslog = os.getenv("UPDATES_PORTAL_ACCESS_LOG") or "-"
errorlog = os.getenv("UPDATES_PORTAL_ERROR_LOG") or "-"
bind = _bind()
