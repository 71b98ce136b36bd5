"""
Note models.

A note is a short piece of text owned by a user and attached to a
conversation thread. Notes are sorted manually through their order value
and can be pinned above all unpinned notes.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_COLOR = "default"

# Columns a partial update may touch. Identity and timestamps are excluded.
UPDATABLE_FIELDS = ("content", "color", "is_pinned", "order")

# SQLite INTEGER range
ORDER_MIN = -(2**63)
ORDER_MAX = 2**63 - 1


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class Note(BaseModel):
    """
    Stored note row.

    Ordering within a user's notes: pinned first, then ascending order,
    then newest created_at first.
    """

    model_config = ConfigDict(json_encoders={datetime: lambda v: v.isoformat()})

    # Core identity
    id: str = Field(..., description="Unique note ID (UUID4)")
    user_id: str = Field(..., description="Owner user ID")
    thread_id: str = Field(..., description="Conversation thread the note belongs to")

    # Content
    content: str = Field(..., description="Note text")
    color: str = Field(default=DEFAULT_COLOR, description="Display color name")

    # Sorting
    is_pinned: bool | None = Field(default=False, description="Pinned notes sort first")
    order: int = Field(default=0, description="Manual sort position")

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utc_now, description="Last update timestamp")

    @property
    def pinned(self) -> bool:
        """Pin state with NULL treated as unpinned."""
        return bool(self.is_pinned)


class NoteUpdate(BaseModel):
    """
    Partial update for a note.

    Only fields the caller explicitly sets are written; everything else
    keeps its stored value. is_pinned may be explicitly set to None since
    the column is nullable.
    """

    model_config = ConfigDict(extra="forbid")

    content: str | None = None
    color: str | None = None
    is_pinned: bool | None = None
    order: int | None = Field(default=None, ge=ORDER_MIN, le=ORDER_MAX)

    @model_validator(mode="after")
    def _reject_null_required_fields(self) -> "NoteUpdate":
        for name in ("content", "color", "order"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """
        Get the explicitly supplied fields.

        Returns:
            Dict of column name to new value, in UPDATABLE_FIELDS order
        """
        return {
            name: getattr(self, name) for name in UPDATABLE_FIELDS if name in self.model_fields_set
        }


class ReorderItem(BaseModel):
    """Single entry of a batch reorder request."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1, description="Note ID")
    order: int = Field(..., ge=ORDER_MIN, le=ORDER_MAX, description="New sort position")
    is_pinned: bool | None = Field(
        default=None,
        description="New pin state; left unchanged when omitted",
    )

    @property
    def has_pin_update(self) -> bool:
        """True when is_pinned was supplied, including an explicit None."""
        return "is_pinned" in self.model_fields_set
