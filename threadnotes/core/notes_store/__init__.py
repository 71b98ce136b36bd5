"""Notes store components for ThreadNotes."""

from threadnotes.core.notes_store.notes_store import NotesStore

__all__ = [
    "NotesStore",
]
