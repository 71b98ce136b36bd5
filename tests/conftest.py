"""
Shared test fixtures.

Each test gets a fresh SQLite database file under tmp_path.
"""

from collections.abc import AsyncGenerator

import pytest

from threadnotes.core.database import SQLiteDatabase
from threadnotes.core.notes_store import NotesStore


@pytest.fixture
async def database(tmp_path) -> AsyncGenerator:
    """Create an initialized SQLite database."""
    db = SQLiteDatabase(db_path=str(tmp_path / "test_notes.db"))
    await db.initialize()
    yield db
    await db.close()


@pytest.fixture
async def store(database) -> NotesStore:
    """Create a NotesStore on the test database."""
    return NotesStore(database)
