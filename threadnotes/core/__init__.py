"""Core components for ThreadNotes."""
