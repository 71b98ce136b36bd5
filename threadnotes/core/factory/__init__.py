"""
Factory modules for creating ThreadNotes components.
"""

from threadnotes.core.factory.database_factory import DatabaseFactory

__all__ = [
    "DatabaseFactory",
]
