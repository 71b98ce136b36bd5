"""
Data models for ThreadNotes.

Core models:
- Note: Stored note row
- NoteUpdate: Explicit optional-field partial update
- ReorderItem: Entry of a batch reorder request
"""

from threadnotes.models.note import (
    DEFAULT_COLOR,
    UPDATABLE_FIELDS,
    Note,
    NoteUpdate,
    ReorderItem,
    utc_now,
)

__all__ = [
    "Note",
    "NoteUpdate",
    "ReorderItem",
    "DEFAULT_COLOR",
    "UPDATABLE_FIELDS",
    "utc_now",
]
