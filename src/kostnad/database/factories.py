"""Database factory functions for creating database instances."""

import os
from typing import Optional

from kostnad.config import DATABASE_URL_ENV, DB_PATH_ENV, default_database_path
from kostnad.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks KOSTNAD_DB_PATH
            environment variable, then defaults to ~/.kostnad/kostnad.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        database_path = str(default_database_path())

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a database from KOSTNAD_DATABASE_URL, or a SQLite file otherwise.

    An explicit database_path always selects SQLite.
    """
    database_url = os.environ.get(DATABASE_URL_ENV)
    if database_path is None and database_url:
        return SQLAlchemyDatabase(database_url)
    return create_sqlite_database(database_path=database_path)
