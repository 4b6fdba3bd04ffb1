"""
Progression model - a named, ordered sequence of chord slots.

A Progression contains:
- An immutable id assigned by the store
- A mutable name
- Slots, addressed by 0-based position. A slot with no chord is an empty
  slot; it still occupies its position.

The model methods perform the positional edits and check every position
against the current length. They do not validate chord symbols - that is the
store's job, done before the edit is applied.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from chuk_mcp_chordify.constants import MAX_PROGRESSION_NAME_LENGTH, ErrorMessages
from chuk_mcp_chordify.errors import PositionOutOfRangeError, ValidationError


def validate_name(name: object) -> str:
    """
    Normalize a progression name.

    Returns:
        The name with surrounding whitespace removed

    Raises:
        ValidationError: If the name is not a string or is blank or too long
    """
    if not isinstance(name, str):
        raise ValidationError(
            ErrorMessages.INVALID_NAME.format(name=name, max_length=MAX_PROGRESSION_NAME_LENGTH)
        )
    normalized = name.strip()
    if not normalized or len(normalized) > MAX_PROGRESSION_NAME_LENGTH:
        raise ValidationError(
            ErrorMessages.INVALID_NAME.format(name=name, max_length=MAX_PROGRESSION_NAME_LENGTH)
        )
    return normalized


class Slot(BaseModel):
    """One position in a progression. `chord` is None for an empty slot."""

    chord: str | None = Field(None, description="Chord symbol, or None if empty")

    model_config = {"frozen": True}


class ProgressionSummary(BaseModel):
    """Lightweight identifier for listing progressions."""

    id: str
    name: str

    model_config = {"frozen": True}


class Progression(BaseModel):
    """A named, ordered sequence of slots owned by a single id."""

    id: str = Field(..., description="Opaque unique identifier")
    name: str = Field(
        ..., min_length=1, max_length=MAX_PROGRESSION_NAME_LENGTH, description="Display name"
    )
    slots: list[Slot] = Field(default_factory=list, description="Ordered chord slots")
    created: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Creation timestamp"
    )
    modified: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Last modified"
    )

    @property
    def slot_count(self) -> int:
        return len(self.slots)

    def chords(self) -> list[str | None]:
        """Chord symbols in slot order, None for empty slots."""
        return [slot.chord for slot in self.slots]

    def summary(self) -> ProgressionSummary:
        return ProgressionSummary(id=self.id, name=self.name)

    def check_position(self, position: int) -> None:
        """
        Ensure `position` addresses an existing slot.

        Raises:
            PositionOutOfRangeError: If position < 0 or position >= len(slots)
        """
        if isinstance(position, bool) or not isinstance(position, int):
            raise PositionOutOfRangeError(position, len(self.slots))
        if not 0 <= position < len(self.slots):
            raise PositionOutOfRangeError(position, len(self.slots))

    def touch(self) -> None:
        self.modified = datetime.now(UTC)

    def add_slot(self) -> int:
        """Append an empty slot and return its position."""
        self.slots.append(Slot())
        self.touch()
        return len(self.slots) - 1

    def set_chord(self, position: int, chord: str) -> None:
        """Assign a chord to an existing slot."""
        self.check_position(position)
        self.slots[position] = Slot(chord=chord)
        self.touch()

    def clear_chord(self, position: int) -> None:
        """Empty a slot without removing it."""
        self.check_position(position)
        self.slots[position] = Slot()
        self.touch()

    def remove_slot(self, position: int) -> Slot:
        """Remove a slot; every later slot moves down one position."""
        self.check_position(position)
        removed = self.slots.pop(position)
        self.touch()
        return removed

    def move_slot(self, old_position: int, new_position: int) -> None:
        """
        Move a slot.

        The slot at `old_position` is removed, then inserted at
        `new_position` of the shortened sequence. Both positions are checked
        against the length before the move.
        """
        self.check_position(old_position)
        self.check_position(new_position)
        if old_position == new_position:
            return
        slot = self.slots.pop(old_position)
        self.slots.insert(new_position, slot)
        self.touch()

    def rename(self, name: str) -> None:
        self.name = validate_name(name)
        self.touch()

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation used by tools and persistence."""
        return {
            "id": self.id,
            "name": self.name,
            "slots": [{"chord": slot.chord} for slot in self.slots],
            "created": self.created.isoformat(),
            "modified": self.modified.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Progression:
        """Create a Progression from the output of to_dict()."""
        return cls.model_validate(data)
