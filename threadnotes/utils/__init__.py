"""Utility modules for ThreadNotes."""

from threadnotes.utils.exceptions import (
    AuthorizationError,
    ConfigurationError,
    DatabaseError,
    NotFoundError,
    NoteCreationError,
    NoteNotFoundOrUnauthorizedError,
    NoteUpdateError,
    PartialOwnershipError,
    ReorderError,
    StoreError,
    ThreadNotesError,
    ValidationError,
)
from threadnotes.utils.id_generator import generate_note_id
from threadnotes.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_note_id",
    # Exceptions
    "ThreadNotesError",
    "StoreError",
    "DatabaseError",
    "NoteCreationError",
    "NoteUpdateError",
    "ReorderError",
    "ValidationError",
    "NotFoundError",
    "NoteNotFoundOrUnauthorizedError",
    "AuthorizationError",
    "PartialOwnershipError",
    "ConfigurationError",
]
