"""
Base interface for relational storage.

The notes store talks to the database only through this interface:
parameterized statements plus an atomic transaction boundary.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager
from typing import Any

Row = dict[str, Any]
Params = Sequence[Any]


class QueryExecutor(ABC):
    """Runs parameterized statements."""

    @abstractmethod
    async def fetch_all(self, sql: str, params: Params = ()) -> list[Row]:
        """
        Run a statement and return every result row.

        Args:
            sql: SQL statement with ? placeholders
            params: Positional parameters

        Returns:
            List of rows as column-name dicts
        """
        pass

    @abstractmethod
    async def fetch_one(self, sql: str, params: Params = ()) -> Row | None:
        """
        Run a statement and return the first result row.

        Args:
            sql: SQL statement with ? placeholders
            params: Positional parameters

        Returns:
            Row dict or None if the statement produced no rows
        """
        pass

    @abstractmethod
    async def execute(self, sql: str, params: Params = ()) -> int:
        """
        Run a statement that produces no rows.

        Args:
            sql: SQL statement with ? placeholders
            params: Positional parameters

        Returns:
            Number of affected rows
        """
        pass


class Transaction(QueryExecutor):
    """Statements executed inside an open transaction."""


class Database(QueryExecutor):
    """Abstract base class for database backends."""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the database (connect and create schema)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""
        pass

    @abstractmethod
    def transaction(self, immediate: bool = True) -> AbstractAsyncContextManager[Transaction]:
        """
        Open an atomic transaction.

        Commits when the block exits normally and rolls back when it raises.
        Statements inside the block must go through the yielded Transaction.

        Args:
            immediate: Take the write lock when the transaction starts

        Returns:
            Async context manager yielding a Transaction
        """
        pass
