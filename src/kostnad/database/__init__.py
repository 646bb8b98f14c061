"""Database layer for kostnad application."""

from kostnad.database.base import Database
from kostnad.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
