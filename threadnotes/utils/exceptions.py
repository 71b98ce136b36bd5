"""
Custom exception hierarchy for ThreadNotes.

Provides structured error types for better error handling and debugging.
All exceptions inherit from ThreadNotesError for easy catching.
"""


class ThreadNotesError(Exception):
    """
    Base exception for all ThreadNotes errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize ThreadNotes error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class StoreError(ThreadNotesError):
    """
    Base exception for store operations.
    Used for errors related to data storage operations.
    """

    pass


class DatabaseError(StoreError):
    """
    Database backend errors.
    Raised when the underlying database client fails.
    """

    pass


class NoteCreationError(StoreError):
    """
    Note creation errors.
    Raised when an insert returns no row or is rejected by the database.
    """

    pass


class NoteUpdateError(StoreError):
    """
    Note update errors.
    Raised when the database fails while writing an update.
    """

    pass


class ReorderError(StoreError):
    """
    Batch reorder errors.
    Raised when the reorder transaction fails and is rolled back.
    The original exception is kept as __cause__ and in context["cause"].
    """

    pass


class ValidationError(ThreadNotesError):
    """
    Validation errors.
    Raised when input validation fails or data is invalid.
    """

    pass


class NotFoundError(ThreadNotesError):
    """
    Resource not found errors.
    Raised when a requested resource doesn't exist.
    """

    pass


class NoteNotFoundOrUnauthorizedError(NotFoundError):
    """
    Raised when no note matches the (note_id, user_id) pair.

    Missing notes and notes owned by someone else are reported the same way.
    """

    pass


class AuthorizationError(ThreadNotesError):
    """
    Ownership errors.
    Raised when a caller acts on resources it does not own.
    """

    pass


class PartialOwnershipError(AuthorizationError):
    """
    Raised by reorder when one or more note IDs are missing or foreign.
    context["note_ids"] lists the offending IDs.
    """

    @property
    def note_ids(self) -> list[str]:
        return list(self.context.get("note_ids", []))


class ConfigurationError(ThreadNotesError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass
