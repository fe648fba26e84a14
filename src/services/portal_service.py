"""Process entrypoint for the holder pages web service.

Run as ``python -m src.services.portal_service`` or directly as a script.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

if __package__ in (None, ""):
    repo_root = Path(__file__).resolve().parents[2]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

SERVICE_LABEL = "portal"
READ_DB_ENV = "DATABASE_URL_PORTAL"


def _apply_portal_db_url() -> None:
    """Point DATABASE_URL at the read database used for holder pages, if set."""
    read_url = os.getenv(READ_DB_ENV)
    if read_url:
        os.environ["DATABASE_URL"] = read_url


def _ensure_env() -> None:
    """Label log records with the service name and select the holder-page DB."""
    os.environ.setdefault("SERVICE_ROLE", SERVICE_LABEL)
    _apply_portal_db_url()


def _load_updates_portal():
    # Deferred until _ensure_env has run.
    from src import updates_portal  # pylint: disable=import-outside-toplevel

    return updates_portal


def main() -> None:
    """Serve holder update listings, update pages and RSS feeds."""
    _ensure_env()
    _load_updates_portal().main()


if __name__ == "__main__":
    main()
