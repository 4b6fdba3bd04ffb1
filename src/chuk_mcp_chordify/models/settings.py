"""
Per-progression settings records.

Both records are 1:1 side tables keyed by progression id, kept apart from the
Progression itself so playback and suggestion concerns evolve independently.

The parse_* helpers turn raw tool input into validated field values and raise
domain errors; the pydantic constraints on the models are a backstop for data
loaded from disk.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, Field, field_validator

from chuk_mcp_chordify.constants import (
    DEFAULT_COMPLEXITY,
    DEFAULT_GENRE,
    DEFAULT_INSTRUMENT,
    DEFAULT_KEY,
    DEFAULT_SECONDS_PER_CHORD,
    MAX_SECONDS_PER_CHORD,
    MIN_SECONDS_PER_CHORD,
    ComplexityLevel,
    ErrorMessages,
    Genre,
    Instrument,
)
from chuk_mcp_chordify.core.theory import is_valid_key
from chuk_mcp_chordify.errors import InvalidKeyError, ValidationError


def _choices(enum_cls: type[Instrument] | type[Genre] | type[ComplexityLevel]) -> str:
    return ", ".join(member.value for member in enum_cls)


def parse_instrument(value: object) -> Instrument:
    try:
        return Instrument(value)
    except ValueError:
        raise ValidationError(
            ErrorMessages.INVALID_INSTRUMENT.format(instrument=value, choices=_choices(Instrument))
        ) from None


def parse_seconds_per_chord(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float) or math.isnan(value):
        valid = False
    else:
        valid = MIN_SECONDS_PER_CHORD <= value <= MAX_SECONDS_PER_CHORD
    if not valid:
        raise ValidationError(
            ErrorMessages.INVALID_SECONDS.format(
                seconds=value, low=MIN_SECONDS_PER_CHORD, high=MAX_SECONDS_PER_CHORD
            )
        )
    return float(value)  # type: ignore[arg-type]


def parse_genre(value: object) -> Genre:
    try:
        return Genre(value)
    except ValueError:
        raise ValidationError(
            ErrorMessages.INVALID_GENRE.format(genre=value, choices=_choices(Genre))
        ) from None


def parse_complexity(value: object) -> ComplexityLevel:
    try:
        return ComplexityLevel(value)
    except ValueError:
        raise ValidationError(
            ErrorMessages.INVALID_COMPLEXITY.format(
                complexity=value, choices=_choices(ComplexityLevel)
            )
        ) from None


def parse_key(value: object) -> str:
    if not is_valid_key(value):
        raise InvalidKeyError(ErrorMessages.INVALID_KEY.format(key=value))
    return str(value).strip()


class PlaybackSettings(BaseModel):
    """How a progression is played back."""

    progression_id: str = Field(..., description="Owning progression id")
    instrument: Instrument = Field(DEFAULT_INSTRUMENT, description="Playback instrument")
    seconds_per_chord: float = Field(
        DEFAULT_SECONDS_PER_CHORD,
        ge=MIN_SECONDS_PER_CHORD,
        le=MAX_SECONDS_PER_CHORD,
        description="Duration of each chord in seconds",
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "progression_id": self.progression_id,
            "instrument": self.instrument.value,
            "seconds_per_chord": self.seconds_per_chord,
        }


class SuggestionPreferences(BaseModel):
    """What chord suggestions for a progression are biased towards."""

    progression_id: str = Field(..., description="Owning progression id")
    genre: Genre = Field(DEFAULT_GENRE, description="Preferred genre")
    complexity: ComplexityLevel = Field(DEFAULT_COMPLEXITY, description="Complexity level")
    key: str = Field(DEFAULT_KEY, description="Musical key, e.g. 'C', 'Am', 'D_minor'")

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        if not is_valid_key(v):
            raise ValueError(f"Invalid key: {v}")
        return v

    def to_dict(self) -> dict[str, Any]:
        return {
            "progression_id": self.progression_id,
            "genre": self.genre.value,
            "complexity": self.complexity.value,
            "key": self.key,
        }
