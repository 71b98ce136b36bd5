"""
Notes Store - all reads and writes of the notes table.

Every mutation is scoped by (note_id, user_id) in the statement itself,
so ownership is checked and enforced in one step with no window between
check and write.

Key responsibilities:
- Ordered listing per user and per thread
- Creation with automatic order assignment
- Partial updates and deletes restricted to the owner
- Atomic batch reorder with ownership validation
"""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from threadnotes.core.database.base import Database, Row
from threadnotes.models.note import DEFAULT_COLOR, Note, NoteUpdate, ReorderItem, utc_now
from threadnotes.utils.exceptions import (
    DatabaseError,
    NoteCreationError,
    NoteNotFoundOrUnauthorizedError,
    NoteUpdateError,
    PartialOwnershipError,
    ReorderError,
    ValidationError,
)
from threadnotes.utils.id_generator import generate_note_id
from threadnotes.utils.logger import get_logger

logger = get_logger(__name__)

NOTE_COLUMNS = 'id, user_id, thread_id, content, color, is_pinned, "order", created_at, updated_at'

# Pinned first (NULL counts as unpinned), then manual order, then newest first
NOTE_ORDERING = 'ORDER BY COALESCE(is_pinned, 0) DESC, "order" ASC, created_at DESC'

# Order is computed from the user's current maximum in the same statement
INSERT_NOTE_SQL = f"""
    INSERT INTO notes (
        id, user_id, thread_id, content, color, is_pinned, "order", created_at, updated_at
    )
    SELECT ?, ?, ?, ?, ?, ?, COALESCE(MAX("order"), -1) + 1, ?, ?
    FROM notes WHERE user_id = ?
    RETURNING {NOTE_COLUMNS}
"""


def _quote(column: str) -> str:
    return f'"{column}"' if column == "order" else column


def _require(value: str, name: str) -> None:
    if not isinstance(value, str):
        raise ValidationError(
            f"{name} must be a string", context={"field": name, "type": type(value).__name__}
        )
    if not value.strip():
        raise ValidationError(f"{name} cannot be empty")


class NotesStore:
    """
    Data-access layer for user notes.

    Holds no state between calls; everything lives in the database.
    """

    def __init__(self, database: Database):
        """
        Initialize NotesStore.

        Args:
            database: Initialized database backend
        """
        self.database = database

    async def list_notes(self, user_id: str) -> list[Note]:
        """
        Get all notes for a user.

        Args:
            user_id: Owner user ID

        Returns:
            Notes ordered pinned first, then by order, then newest first.
            Empty list if the user has none.
        """
        _require(user_id, "user_id")

        rows = await self.database.fetch_all(
            f"SELECT {NOTE_COLUMNS} FROM notes WHERE user_id = ? {NOTE_ORDERING}",
            (user_id,),
        )
        logger.bind(user_id=user_id).debug("Listed {} notes", len(rows))
        return [self._row_to_note(row) for row in rows]

    async def list_thread_notes(self, user_id: str, thread_id: str) -> list[Note]:
        """
        Get a user's notes within one thread.

        Args:
            user_id: Owner user ID
            thread_id: Thread to filter by

        Returns:
            Notes in the same order as list_notes
        """
        _require(user_id, "user_id")
        _require(thread_id, "thread_id")

        rows = await self.database.fetch_all(
            f"SELECT {NOTE_COLUMNS} FROM notes WHERE user_id = ? AND thread_id = ? {NOTE_ORDERING}",
            (user_id, thread_id),
        )
        log = logger.bind(user_id=user_id, thread_id=thread_id)
        log.debug("Listed {} thread notes", len(rows))
        return [self._row_to_note(row) for row in rows]

    async def create_note(
        self,
        user_id: str,
        thread_id: str,
        content: str,
        color: str = DEFAULT_COLOR,
        is_pinned: bool | None = False,
    ) -> Note:
        """
        Create a note at the end of the user's manual order.

        The new order is the user's highest order + 1, or 0 for the first
        note. Computing and inserting happen in one statement under a write
        transaction, so concurrent creates get distinct orders.

        Args:
            user_id: Owner user ID
            thread_id: Thread the note belongs to
            content: Note text
            color: Display color
            is_pinned: Initial pin state

        Returns:
            Created note

        Raises:
            ValidationError: If user_id or thread_id is empty
            NoteCreationError: If the insert fails or returns no row
        """
        _require(user_id, "user_id")
        _require(thread_id, "thread_id")

        note_id = generate_note_id()
        now = utc_now().isoformat()

        log = logger.bind(user_id=user_id, thread_id=thread_id, note_id=note_id)
        log.info("Creating note")

        try:
            async with self.database.transaction() as tx:
                row = await tx.fetch_one(
                    INSERT_NOTE_SQL,
                    (note_id, user_id, thread_id, content, color, is_pinned, now, now, user_id),
                )
        except DatabaseError as e:
            log.error("Failed to create note: {}", e)
            raise NoteCreationError(
                f"Failed to create note: {e}", context={"user_id": user_id}
            ) from e

        if row is None:
            raise NoteCreationError("Failed to create note", context={"user_id": user_id})

        note = self._row_to_note(row)
        log.debug("Note created at order {}", note.order)
        return note

    async def update_note(
        self,
        user_id: str,
        note_id: str,
        data: NoteUpdate | Mapping[str, Any],
    ) -> Note:
        """
        Apply a partial update to a note owned by the user.

        Only fields explicitly set on data change; updated_at is always
        refreshed.

        Args:
            user_id: Owner user ID
            note_id: Note to update
            data: NoteUpdate or a dict of content/color/is_pinned/order

        Returns:
            Updated note

        Raises:
            ValidationError: If the IDs are empty or data has disallowed fields
            NoteNotFoundOrUnauthorizedError: If no note matches (note_id, user_id)
            NoteUpdateError: If the database fails during the write
        """
        _require(user_id, "user_id")
        _require(note_id, "note_id")
        update = self._coerce(NoteUpdate, data)

        changes = update.changes()
        changes["updated_at"] = utc_now().isoformat()
        assignments = ", ".join(f"{_quote(column)} = ?" for column in changes)

        log = logger.bind(user_id=user_id, note_id=note_id)
        log.info("Updating note fields {}", list(changes))

        try:
            row = await self.database.fetch_one(
                f"UPDATE notes SET {assignments} WHERE id = ? AND user_id = ? "
                f"RETURNING {NOTE_COLUMNS}",
                (*changes.values(), note_id, user_id),
            )
        except DatabaseError as e:
            log.error("Failed to update note: {}", e)
            raise NoteUpdateError(
                f"Failed to update note: {e}", context={"note_id": note_id, "user_id": user_id}
            ) from e

        if row is None:
            log.warning("Update rejected, note not found or unauthorized")
            raise NoteNotFoundOrUnauthorizedError(
                "Note not found or unauthorized",
                context={"note_id": note_id, "user_id": user_id},
            )

        return self._row_to_note(row)

    async def delete_note(self, user_id: str, note_id: str) -> bool:
        """
        Delete a note owned by the user.

        Args:
            user_id: Owner user ID
            note_id: Note to delete

        Returns:
            True once deleted

        Raises:
            ValidationError: If the IDs are empty
            NoteNotFoundOrUnauthorizedError: If no note matches (note_id, user_id)
        """
        _require(user_id, "user_id")
        _require(note_id, "note_id")

        deleted = await self.database.execute(
            "DELETE FROM notes WHERE id = ? AND user_id = ?",
            (note_id, user_id),
        )
        log = logger.bind(user_id=user_id, note_id=note_id)
        if deleted == 0:
            log.warning("Delete rejected, note not found or unauthorized")
            raise NoteNotFoundOrUnauthorizedError(
                "Note not found or unauthorized",
                context={"note_id": note_id, "user_id": user_id},
            )

        log.info("Note deleted")
        return True

    async def reorder_notes(
        self,
        user_id: str,
        items: Sequence[ReorderItem | Mapping[str, Any]],
    ) -> bool:
        """
        Set order (and optionally pin state) for many notes at once.

        Ownership of every ID is verified inside the same transaction as
        the writes. Either all items are applied or none are.

        Args:
            user_id: Owner user ID
            items: ReorderItem entries or dicts with id, order and optional is_pinned

        Returns:
            True on success, including for an empty batch

        Raises:
            ValidationError: If user_id is empty or an item is malformed
            PartialOwnershipError: If any ID is missing or owned by another user
            ReorderError: If the transaction fails; nothing is written
        """
        _require(user_id, "user_id")
        if not items:
            return True

        reorder_items = [self._coerce(ReorderItem, item) for item in items]
        note_ids = list(dict.fromkeys(item.id for item in reorder_items))

        log = logger.bind(user_id=user_id)
        log.info("Reordering {} notes", len(reorder_items))

        try:
            async with self.database.transaction() as tx:
                placeholders = ", ".join("?" for _ in note_ids)
                rows = await tx.fetch_all(
                    f"SELECT id FROM notes WHERE user_id = ? AND id IN ({placeholders})",
                    (user_id, *note_ids),
                )
                owned = {row["id"] for row in rows}
                missing = [note_id for note_id in note_ids if note_id not in owned]
                if missing:
                    log.bind(note_ids=missing).warning("Notes not found or unauthorized")
                    raise PartialOwnershipError(
                        "One or more notes not found or unauthorized",
                        context={"user_id": user_id, "note_ids": missing},
                    )

                now = utc_now().isoformat()
                for item in reorder_items:
                    if item.has_pin_update:
                        affected = await tx.execute(
                            'UPDATE notes SET "order" = ?, is_pinned = ?, updated_at = ? '
                            "WHERE id = ? AND user_id = ?",
                            (item.order, item.is_pinned, now, item.id, user_id),
                        )
                    else:
                        affected = await tx.execute(
                            'UPDATE notes SET "order" = ?, updated_at = ? '
                            "WHERE id = ? AND user_id = ?",
                            (item.order, now, item.id, user_id),
                        )
                    if affected == 0:
                        raise DatabaseError(
                            f"Note {item.id} was not updated",
                            context={"note_id": item.id},
                        )
        except PartialOwnershipError:
            raise
        except Exception as e:
            log.bind(note_ids=note_ids).error("Error in reorder transaction: {}", e)
            raise ReorderError(
                f"Failed to reorder notes: {e}",
                context={"user_id": user_id, "note_ids": note_ids, "cause": str(e)},
            ) from e

        return True

    @staticmethod
    def _coerce(model: type, data: Any) -> Any:
        """Validate a dict into the given model, passing model instances through."""
        if isinstance(data, model):
            return data
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid {model.__name__}: {e.error_count()} error(s)",
                context={"errors": e.errors(include_url=False)},
            ) from e

    @staticmethod
    def _row_to_note(row: Row) -> Note:
        """Convert a database row to a Note."""
        return Note.model_validate(row)
