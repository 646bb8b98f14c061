"""Central configuration: environment variables, defaults, logging setup."""

import logging
import os
from pathlib import Path
from typing import Optional

DB_PATH_ENV = "KOSTNAD_DB_PATH"
DATABASE_URL_ENV = "KOSTNAD_DATABASE_URL"
USER_ENV = "KOSTNAD_USER"
LOG_LEVEL_ENV = "KOSTNAD_LOG_LEVEL"

DEFAULT_DATA_DIR = ".kostnad"
DEFAULT_DB_FILE = "kostnad.db"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def default_database_path() -> Path:
    """Return ~/.kostnad/kostnad.db, creating the directory if needed."""
    db_dir = Path.home() / DEFAULT_DATA_DIR
    db_dir.mkdir(exist_ok=True)
    return db_dir / DEFAULT_DB_FILE


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once.

    Args:
        level: Level name; falls back to KOSTNAD_LOG_LEVEL, then WARNING.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.WARNING))

    # avoid duplicate handlers when the CLI is invoked repeatedly in one process
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
