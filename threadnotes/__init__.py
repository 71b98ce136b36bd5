"""ThreadNotes - user and thread scoped notes storage."""

__version__ = "1.0.0"
