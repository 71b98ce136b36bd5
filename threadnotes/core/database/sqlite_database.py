"""
SQLite database backend using aiosqlite.

One connection in autocommit mode. Transactions are opened explicitly with
BEGIN IMMEDIATE so the write lock is held from the first statement.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from threadnotes.core.database.base import Database, Params, Row, Transaction
from threadnotes.utils.exceptions import DatabaseError
from threadnotes.utils.logger import get_logger

logger = get_logger(__name__)

MEMORY_PATH = ":memory:"

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS notes (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        thread_id TEXT NOT NULL,
        content TEXT NOT NULL,
        color TEXT NOT NULL DEFAULT 'default',
        is_pinned INTEGER DEFAULT 0,
        "order" INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_notes_user ON notes(user_id)",
    "CREATE INDEX IF NOT EXISTS idx_notes_user_thread ON notes(user_id, thread_id)",
)


async def _fetch_all(connection: aiosqlite.Connection, sql: str, params: Params) -> list[Row]:
    # Ints outside SQLite INTEGER range fail binding with OverflowError
    try:
        async with connection.execute(sql, params) as cursor:
            rows = await cursor.fetchall()
    except (aiosqlite.Error, OverflowError) as e:
        raise DatabaseError(f"Query failed: {e}", context={"sql": sql}) from e
    return [dict(row) for row in rows]


async def _execute(connection: aiosqlite.Connection, sql: str, params: Params) -> int:
    try:
        async with connection.execute(sql, params) as cursor:
            return cursor.rowcount
    except (aiosqlite.Error, OverflowError) as e:
        raise DatabaseError(f"Statement failed: {e}", context={"sql": sql}) from e


class SQLiteTransaction(Transaction):
    """Statements bound to a connection with an open transaction."""

    def __init__(self, connection: aiosqlite.Connection):
        self.connection = connection

    async def fetch_all(self, sql: str, params: Params = ()) -> list[Row]:
        return await _fetch_all(self.connection, sql, params)

    async def fetch_one(self, sql: str, params: Params = ()) -> Row | None:
        rows = await _fetch_all(self.connection, sql, params)
        return rows[0] if rows else None

    async def execute(self, sql: str, params: Params = ()) -> int:
        return await _execute(self.connection, sql, params)


class SQLiteDatabase(Database):
    """
    SQLite-based database for note storage.

    Features:
    - Fast local storage
    - WAL journal for file databases
    - Explicit transactions with rollback on error

    A single connection is shared by all callers, so every statement and
    every transaction runs under one asyncio lock. Without it a statement
    from another coroutine could land inside an open transaction.
    """

    def __init__(self, db_path: str = "data/threadnotes.db", busy_timeout: float = 5.0):
        """
        Initialize SQLite database.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
            busy_timeout: Seconds to wait for a locked database
        """
        self.db_path = db_path
        self.busy_timeout = busy_timeout
        self.connection: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

        # Ensure directory exists
        if db_path != MEMORY_PATH:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def _connect(self) -> aiosqlite.Connection:
        """Establish connection to SQLite. Caller must hold the lock."""
        if self.connection is None:
            try:
                self.connection = await aiosqlite.connect(
                    self.db_path,
                    timeout=self.busy_timeout,
                    isolation_level=None,
                )
                self.connection.row_factory = aiosqlite.Row
                if self.db_path != MEMORY_PATH:
                    await self.connection.execute("PRAGMA journal_mode = WAL")
            except aiosqlite.Error as e:
                raise DatabaseError(
                    f"Failed to open database: {e}", context={"db_path": self.db_path}
                ) from e
            logger.debug("Connected to SQLite database: {}", self.db_path)
        return self.connection

    async def initialize(self) -> None:
        """Initialize database schema."""
        async with self._lock:
            connection = await self._connect()
            for statement in SCHEMA:
                await _execute(connection, statement, ())
        logger.info("SQLite database initialized: {}", self.db_path)

    async def close(self) -> None:
        """Close the connection if open."""
        async with self._lock:
            if self.connection is not None:
                await self.connection.close()
                self.connection = None
                logger.debug("Closed SQLite database: {}", self.db_path)

    async def fetch_all(self, sql: str, params: Params = ()) -> list[Row]:
        async with self._lock:
            connection = await self._connect()
            return await _fetch_all(connection, sql, params)

    async def fetch_one(self, sql: str, params: Params = ()) -> Row | None:
        rows = await self.fetch_all(sql, params)
        return rows[0] if rows else None

    async def execute(self, sql: str, params: Params = ()) -> int:
        async with self._lock:
            connection = await self._connect()
            return await _execute(connection, sql, params)

    @asynccontextmanager
    async def transaction(self, immediate: bool = True) -> AsyncIterator[SQLiteTransaction]:
        """Open a transaction that commits on success and rolls back on error."""
        async with self._lock:
            connection = await self._connect()
            await _execute(connection, "BEGIN IMMEDIATE" if immediate else "BEGIN", ())
            try:
                yield SQLiteTransaction(connection)
                await _execute(connection, "COMMIT", ())
            except BaseException:
                # Some errors already end the transaction inside SQLite
                if connection.in_transaction:
                    await connection.execute("ROLLBACK")
                    logger.debug("Transaction rolled back")
                raise
