"""Logging setup shared by the portal entrypoints.

Every record carries a service label so that processes sharing a log stream
can be told apart::

    2024-05-01 10:00:00,000 | INFO | portal | updates portal ready: ...
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .env_utils import env_bool

LOG_FORMAT = "%(asctime)s | %(levelname)s | {service} | %(message)s"
LOG_LEVELS = {
    name: getattr(logging, name)
    for name in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")
}
QUIET_LIBRARIES = ("werkzeug", "psycopg", "psycopg.pool")


def parse_log_level(raw: str | None, fallback: int = logging.INFO) -> int:
    """Parse a level name or number; unknown values give ``fallback``."""
    if not raw:
        return fallback
    raw = raw.strip().upper()
    if raw.isdigit():
        return int(raw)
    return LOG_LEVELS.get(raw, fallback)


def service_label(default: str = "unknown") -> str:
    """Return the lowercased service label from SERVICE_ROLE or UPDATES_SERVICE."""
    for key in ("SERVICE_ROLE", "UPDATES_SERVICE"):
        value = (os.getenv(key) or "").strip()
        if value:
            return value.lower()
    return default


def _log_filename(label: str) -> str:
    safe = "".join(char if char.isalnum() or char in "-_" else "_" for char in label)
    return f"{safe or 'service'}.log"


def _expand(raw: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(raw)))


@dataclass(frozen=True)
class LogSettings:
    """Logging options resolved from the environment.

    :ivar level_name: Raw ``LOG_LEVEL`` value.
    :ivar level: Resolved level (INFO when the name is unknown).
    :ivar service: Label rendered into every record.
    :ivar log_file: Target file from ``LOG_FILE`` or ``LOG_DIR``, if any.
    :ivar stdout: Also log to the console (``LOG_STDOUT``, default on).
    :ivar library_level: Level forced on chatty libraries, or None.
    """

    level_name: str
    level: int
    service: str
    log_file: Optional[Path]
    stdout: bool
    library_level: Optional[int]

    @property
    def known_level(self) -> bool:
        """Return True when ``level_name`` names a real level."""
        raw = self.level_name.strip().upper()
        return raw.isdigit() or raw in LOG_LEVELS

    @property
    def format(self) -> str:
        """Return the record format with the service label filled in."""
        return LOG_FORMAT.format(service=self.service)


def load_log_settings(default_service: str = "unknown") -> LogSettings:
    """Read LOG_* variables into a :class:`LogSettings`."""
    level_name = os.getenv("LOG_LEVEL") or "INFO"
    level = parse_log_level(level_name)
    service = service_label(default_service)

    log_file = None
    if os.getenv("LOG_FILE"):
        log_file = _expand(os.environ["LOG_FILE"])
    elif os.getenv("LOG_DIR"):
        log_file = _expand(os.environ["LOG_DIR"]) / _log_filename(service)

    library_raw = os.getenv("LOG_LIBRARY_LEVEL")
    if library_raw:
        library_level: Optional[int] = parse_log_level(library_raw, logging.WARNING)
    elif level <= logging.DEBUG:
        library_level = logging.WARNING
    else:
        library_level = None

    return LogSettings(
        level_name=level_name,
        level=level,
        service=service,
        log_file=log_file,
        stdout=env_bool("LOG_STDOUT", True),
        library_level=library_level,
    )


def _open_file_handler(path: Path) -> Optional[logging.Handler]:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(path)
    except OSError as exc:
        print(
            f"Warning: unable to log to {path}: {exc}. Falling back to console logging.",
            file=sys.stderr,
        )
        return None


def build_handlers(settings: LogSettings) -> list[logging.Handler]:
    """Build the file and/or console handlers; never returns an empty list."""
    handlers: list[logging.Handler] = []
    if settings.log_file is not None:
        handler = _open_file_handler(settings.log_file)
        if handler is not None:
            handlers.append(handler)
    if settings.stdout or not handlers:
        handlers.append(logging.StreamHandler())
    return handlers


def quiet_libraries(level: Optional[int]) -> None:
    """Apply ``level`` to the noisy third-party loggers."""
    if level is None:
        return
    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(level)


def configure_logging(default_service: str, logger: logging.Logger) -> LogSettings:
    """Configure root logging once per process and return the settings used."""
    settings = load_log_settings(default_service)
    logging.basicConfig(
        level=settings.level,
        format=settings.format,
        handlers=build_handlers(settings),
    )
    quiet_libraries(settings.library_level)
    if not settings.known_level:
        logger.warning("Unknown LOG_LEVEL=%s; defaulting to INFO", settings.level_name)
    return settings
