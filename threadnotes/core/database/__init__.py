"""
Database backends for ThreadNotes.

Provides the abstract query/transaction interface and concrete backends.

Available backends:
- SQLiteDatabase: Local file or in-memory SQLite via aiosqlite
"""

from threadnotes.core.database.base import Database, QueryExecutor, Transaction
from threadnotes.core.database.sqlite_database import SQLiteDatabase

__all__ = [
    "Database",
    "QueryExecutor",
    "Transaction",
    "SQLiteDatabase",
]
