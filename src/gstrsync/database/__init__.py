"""Database layer for gstrsync application."""

from gstrsync.database.base import Database
from gstrsync.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
