"""Settings loader for the dated updates portal."""

import os
from dataclasses import dataclass

from src.core.env_utils import env_int, env_positive_int, env_str

from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
ENV_FILE = os.getenv("ENV_FILE") or os.path.abspath(os.path.join(BASE_DIR, "..", ".env"))


@dataclass(frozen=True)
class Settings:
    """Runtime configuration parsed from environment variables.

    :ivar database_url: Postgres connection string (empty when unset).
    :ivar update_source: Name of the update source preset (updates/news).
    :ivar page_size: Updates per page on the holder view.
    :ivar rss_limit: Number of entries in the RSS feed.
    :ivar db_connect_timeout: Seconds to wait for a database connection.
    """

    database_url: str
    update_source: str
    page_size: int
    rss_limit: int
    db_connect_timeout: int


def load_settings(*, read_env_file: bool = True) -> Settings:
    """Load settings from environment and .env defaults.

    :param read_env_file: Load ``ENV_FILE`` into the environment first.
    :type read_env_file: bool
    :return: Parsed settings dataclass.
    :rtype: Settings
    """
    if read_env_file:
        load_dotenv(dotenv_path=ENV_FILE)
    database_url = os.getenv("DATABASE_URL") or ""
    if database_url:
        database_url = os.path.expandvars(os.path.expanduser(database_url))
    return Settings(
        database_url=database_url,
        update_source=env_str("UPDATES_SOURCE", "updates").lower(),
        page_size=env_int("UPDATES_PAGE_SIZE", 20, minimum=1),
        rss_limit=env_positive_int("UPDATES_RSS_LIMIT", 20),
        db_connect_timeout=env_positive_int("UPDATES_DB_CONNECT_TIMEOUT", 5),
    )
