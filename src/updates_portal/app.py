"""Flask app wiring for the updates portal."""

from __future__ import annotations

import logging
import os
import time

from flask import Flask, g, request  # pylint: disable=import-error
from werkzeug.middleware.proxy_fix import ProxyFix  # pylint: disable=import-error

from ..core.logging_utils import configure_logging as configure_service_logging
from ..core.env_utils import TRUTHY, parse_bool
from ..core.settings import load_settings
from .config import resolve_update_source
from .db_timing import get_db_metrics, reset_db_metrics
from .routes import register_blueprints

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
TEMPLATE_DIR = os.path.join(BASE_DIR, "templates")


def configure_logging() -> None:
    """Configure portal logging from LOG_* environment settings."""
    configure_service_logging("portal", logger)


def _require_secret_key() -> str:
    secret = os.getenv("UPDATES_PORTAL_SECRET_KEY")
    if not secret:
        logger.warning("UPDATES_PORTAL_SECRET_KEY is required for portal sessions.")
        raise RuntimeError("UPDATES_PORTAL_SECRET_KEY is not set.")
    return secret


def _apply_session_cookie_settings(app: Flask) -> None:
    raw = os.getenv("UPDATES_PORTAL_COOKIE_SECURE")
    if raw is not None:
        app.config["SESSION_COOKIE_SECURE"] = parse_bool(raw)

    raw = os.getenv("UPDATES_PORTAL_COOKIE_HTTPONLY")
    if raw is not None:
        app.config["SESSION_COOKIE_HTTPONLY"] = parse_bool(raw)

    raw = os.getenv("UPDATES_PORTAL_COOKIE_SAMESITE")
    if raw is not None:
        normalized = raw.strip().lower()
        if normalized == "":
            app.config["SESSION_COOKIE_SAMESITE"] = None
        elif normalized in {"lax", "strict", "none"}:
            app.config["SESSION_COOKIE_SAMESITE"] = (
                "None" if normalized == "none" else normalized.capitalize()
            )
        else:
            logger.warning(
                "Invalid UPDATES_PORTAL_COOKIE_SAMESITE=%s; expected Lax, Strict, None, or empty.",
                raw,
            )

    raw = os.getenv("UPDATES_PORTAL_COOKIE_NAME")
    if raw is not None:
        app.config["SESSION_COOKIE_NAME"] = raw.strip() or "session"


def _parse_proxy_count(raw: str) -> int:
    raw = raw.strip().lower()
    if raw in TRUTHY:
        return 1
    try:
        count = int(raw)
    except ValueError:
        return 0
    return max(0, count)


def _apply_proxy_fix(app: Flask) -> None:
    raw = os.getenv("UPDATES_PORTAL_TRUST_PROXY")
    if not raw:
        return
    count = _parse_proxy_count(raw)
    if count <= 0:
        return
    app.wsgi_app = ProxyFix(
        app.wsgi_app,
        x_for=count,
        x_proto=count,
        x_host=count,
        x_port=count,
    )


def start_request_timer() -> None:
    """Start request timing and reset DB counters."""
    g.request_start = time.perf_counter()
    reset_db_metrics()


def log_request_timing(response):
    """Log total and DB time for the request."""
    start = getattr(g, "request_start", None)
    if start is None:
        return response
    total_ms = (time.perf_counter() - start) * 1000
    db_ms, db_queries = get_db_metrics()
    logger.info(
        "request timing: method=%s path=%s endpoint=%s status=%s "
        "total_ms=%.1f db_ms=%.1f db_queries=%d",
        request.method,
        request.path,
        request.endpoint,
        response.status_code,
        total_ms,
        db_ms,
        db_queries,
    )
    return response


def create_app() -> Flask:
    """Create and configure the Flask application."""
    configure_logging()
    settings = load_settings()
    app = Flask(__name__, template_folder=TEMPLATE_DIR)
    app.secret_key = _require_secret_key()
    app.config["UPDATES_SETTINGS"] = settings
    app.config["UPDATE_SOURCE"] = resolve_update_source(settings.update_source)
    _apply_session_cookie_settings(app)
    _apply_proxy_fix(app)
    app.before_request(start_request_timer)
    app.after_request(log_request_timing)
    register_blueprints(app)
    logger.info(
        "updates portal ready: source=%s page_size=%d rss_limit=%d",
        settings.update_source,
        settings.page_size,
        settings.rss_limit,
    )
    return app
