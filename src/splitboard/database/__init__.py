"""Database layer for splitboard application."""

from splitboard.database.base import Database
from splitboard.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
