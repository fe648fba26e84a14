"""Web portal for browsing dated updates under holder pages."""

from __future__ import annotations

import logging
import os

from ..core.env_utils import env_bool, env_int

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the updates portal with the Flask development server.

    :return: None.
    :rtype: None
    """
    from .app import create_app  # pylint: disable=import-outside-toplevel
    from .db import _db_connection, ensure_tables_present  # pylint: disable=import-outside-toplevel

    app = create_app()
    db_url = os.getenv("DATABASE_URL")
    if not db_url:
        raise RuntimeError("DATABASE_URL is not set; cannot start portal.")
    try:
        with _db_connection(connect_timeout=3) as conn:
            ensure_tables_present(conn, app.config["UPDATE_SOURCE"])
    except RuntimeError as exc:
        logger.error("Record store check failed: %s", exc)
        raise
    port = env_int("UPDATES_PORTAL_PORT", 8000, minimum=1)
    host = os.getenv("UPDATES_PORTAL_HOST", "0.0.0.0")
    threads = env_int("UPDATES_PORTAL_THREADS", 1, minimum=1)
    threaded = env_bool("UPDATES_PORTAL_THREADED", threads > 1)
    app.run(host=host, port=port, threaded=threaded)


if __name__ == "__main__":
    main()
