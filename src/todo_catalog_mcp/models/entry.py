"""TodoEntry model -- a single record in the catalog.

Entries are immutable values.  Completing an entry produces a new value
which the catalog swaps into its mapping; nothing mutates a record that a
caller already holds.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Ids become the authority part of a resource URI, so they are limited to
# characters that need no escaping there.
ID_PATTERN = r"^[A-Za-z0-9_-]+$"
MAX_ID_LENGTH = 64


class EntryState(str, Enum):
    """Lifecycle state of an entry.  ``COMPLETED`` is terminal."""

    PENDING = "pending"
    COMPLETED = "completed"


class TodoEntry(BaseModel):
    """A single TODO record: identifier, title and completion flag."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        max_length=MAX_ID_LENGTH,
        pattern=ID_PATTERN,
        description="Catalog-assigned identifier, unique and never reused.",
    )
    title: str = Field(
        ...,
        min_length=1,
        description="Human-readable title, immutable after creation.",
    )
    completed: bool = Field(
        default=False,
        description="Completion flag; only ever moves from false to true.",
    )

    @field_validator("id", "title")
    @classmethod
    def reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @property
    def state(self) -> EntryState:
        return EntryState.COMPLETED if self.completed else EntryState.PENDING

    def mark_completed(self) -> "TodoEntry":
        """Return a completed copy of this entry (``self`` if already completed)."""
        if self.completed:
            return self
        return self.model_copy(update={"completed": True})

    def to_json_dict(self) -> dict:
        """Serialize to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_json_dict(cls, data: dict) -> "TodoEntry":
        """Deserialize from a JSON-compatible dictionary."""
        return cls.model_validate(data)
