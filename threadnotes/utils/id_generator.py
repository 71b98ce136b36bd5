"""ID generation utilities for ThreadNotes."""

from uuid import uuid4


def generate_note_id() -> str:
    """
    Generate unique Note ID.

    Returns:
        Canonical UUID4 string (36 characters)
    """
    return str(uuid4())
