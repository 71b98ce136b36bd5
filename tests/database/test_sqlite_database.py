"""Tests for the SQLite database backend."""

import pytest

from threadnotes.core.database import SQLiteDatabase
from threadnotes.utils.exceptions import DatabaseError

INSERT = (
    "INSERT INTO notes (id, user_id, thread_id, content, created_at, updated_at) "
    "VALUES (?, ?, ?, ?, ?, ?)"
)


def _row(note_id: str) -> tuple:
    return (note_id, "u1", "t1", "text", "2024-01-01T00:00:00+00:00", "2024-01-01T00:00:00+00:00")


class TestSQLiteDatabase:
    """Test SQLite database implementation."""

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, database):
        """Test schema creation can run twice."""
        await database.initialize()

        rows = await database.fetch_all(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'notes'"
        )
        assert rows == [{"name": "notes"}]

    @pytest.mark.asyncio
    async def test_column_defaults(self, database):
        """Test color, pin and order defaults."""
        await database.execute(INSERT, _row("n1"))

        row = await database.fetch_one('SELECT color, is_pinned, "order" FROM notes')

        assert row == {"color": "default", "is_pinned": 0, "order": 0}

    @pytest.mark.asyncio
    async def test_execute_returns_rowcount(self, database):
        """Test affected row counts."""
        await database.execute(INSERT, _row("n1"))
        await database.execute(INSERT, _row("n2"))

        assert await database.execute("UPDATE notes SET content = 'x'") == 2
        assert await database.execute("DELETE FROM notes WHERE id = ?", ("missing",)) == 0

    @pytest.mark.asyncio
    async def test_integer_overflow_raises_database_error(self, database):
        """Test parameters outside SQLite INTEGER range surface as DatabaseError."""
        await database.execute(INSERT, _row("n1"))

        with pytest.raises(DatabaseError):
            await database.execute('UPDATE notes SET "order" = ?', (2**63,))
        with pytest.raises(DatabaseError):
            await database.fetch_all('SELECT id FROM notes WHERE "order" = ?', (-(2**63) - 1,))

        row = await database.fetch_one('SELECT "order" FROM notes')
        assert row == {"order": 0}

    @pytest.mark.asyncio
    async def test_fetch_one_empty(self, database):
        """Test fetch_one with no rows."""
        assert await database.fetch_one("SELECT id FROM notes") is None

    @pytest.mark.asyncio
    async def test_transaction_commits(self, database):
        """Test statements in a transaction are visible after exit."""
        async with database.transaction() as tx:
            await tx.execute(INSERT, _row("n1"))
            await tx.execute(INSERT, _row("n2"))

        rows = await database.fetch_all("SELECT id FROM notes ORDER BY id")
        assert [row["id"] for row in rows] == ["n1", "n2"]

    @pytest.mark.asyncio
    async def test_transaction_rolls_back_on_error(self, database):
        """Test an exception discards every statement in the transaction."""
        with pytest.raises(RuntimeError):
            async with database.transaction() as tx:
                await tx.execute(INSERT, _row("n1"))
                raise RuntimeError("abort")

        assert await database.fetch_all("SELECT id FROM notes") == []

    @pytest.mark.asyncio
    async def test_transaction_rolls_back_on_database_error(self, database):
        """Test a failing statement rolls back earlier statements."""
        with pytest.raises(DatabaseError):
            async with database.transaction() as tx:
                await tx.execute(INSERT, _row("n1"))
                await tx.execute(INSERT, _row("n1"))  # duplicate primary key

        assert await database.fetch_all("SELECT id FROM notes") == []
        # Connection is usable afterwards
        await database.execute(INSERT, _row("n2"))
        assert await database.fetch_one("SELECT id FROM notes") == {"id": "n2"}

    @pytest.mark.asyncio
    async def test_invalid_sql_raises_database_error(self, database):
        """Test driver errors are wrapped."""
        with pytest.raises(DatabaseError) as exc_info:
            await database.fetch_all("SELECT * FROM nope")

        assert exc_info.value.__cause__ is not None
        assert "sql" in exc_info.value.context

    @pytest.mark.asyncio
    async def test_memory_database(self):
        """Test in-memory database support."""
        db = SQLiteDatabase(db_path=":memory:")
        await db.initialize()
        try:
            await db.execute(INSERT, _row("n1"))
            assert await db.fetch_one("SELECT id FROM notes") == {"id": "n1"}
        finally:
            await db.close()

    @pytest.mark.asyncio
    async def test_close_and_reconnect(self, tmp_path):
        """Test data persists across close and reconnect."""
        db = SQLiteDatabase(db_path=str(tmp_path / "nested" / "notes.db"))
        await db.initialize()
        await db.execute(INSERT, _row("n1"))
        await db.close()

        assert db.connection is None
        assert await db.fetch_one("SELECT id FROM notes") == {"id": "n1"}
        await db.close()
