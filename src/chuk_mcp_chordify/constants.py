"""
Constants and enums for the progression service.

No magic strings - use enums for constrained values.
"""

from __future__ import annotations

from enum import Enum


class _LenientEnum(str, Enum):
    """String enum that also matches its values case-insensitively."""

    @classmethod
    def _missing_(cls, value: object) -> _LenientEnum | None:
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None


class Instrument(_LenientEnum):
    """Instruments a progression can be played back with."""

    PIANO = "Piano"
    GUITAR = "Guitar"
    SYNTHESIZER = "Synthesizer"


class Genre(_LenientEnum):
    """Genres that bias chord suggestions."""

    POP = "Pop"
    ROCK = "Rock"
    JAZZ = "Jazz"
    CLASSICAL = "Classical"
    HIP_HOP = "Hip hop"
    RNB = "R&B"
    COUNTRY = "Country"
    ELECTRONIC = "Electronic"


class ComplexityLevel(_LenientEnum):
    """How adventurous chord suggestions may be."""

    SIMPLE = "Simple"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


# Playback
MIN_SECONDS_PER_CHORD = 1.0
MAX_SECONDS_PER_CHORD = 10.0
DEFAULT_INSTRUMENT = Instrument.PIANO
DEFAULT_SECONDS_PER_CHORD = 2.0

# Suggestions
NUM_SUGGESTIONS = 24
NUM_PROGRESSION_SUGGESTIONS = 3
MAX_SUGGESTED_PROGRESSION_LENGTH = 32
DEFAULT_GENRE = Genre.POP
DEFAULT_COMPLEXITY = ComplexityLevel.SIMPLE
DEFAULT_KEY = "C"

# Progressions
MAX_PROGRESSION_NAME_LENGTH = 100

# Voicing registers by instrument: (bass octave, chord octave)
INSTRUMENT_REGISTERS: dict[Instrument, tuple[int, int]] = {
    Instrument.PIANO: (3, 4),
    Instrument.GUITAR: (2, 3),
    Instrument.SYNTHESIZER: (3, 4),
}

# General MIDI programs (0-indexed)
INSTRUMENT_PROGRAMS: dict[Instrument, int] = {
    Instrument.PIANO: 0,  # Acoustic Grand Piano
    Instrument.GUITAR: 24,  # Acoustic Guitar (nylon)
    Instrument.SYNTHESIZER: 89,  # Pad 2 (warm)
}


class ErrorMessages:
    """Standardized error messages."""

    PROGRESSION_NOT_FOUND = "Progression '{progression_id}' not found."
    PLAYBACK_SETTINGS_NOT_FOUND = "No playback settings for progression '{progression_id}'."
    PREFERENCES_NOT_FOUND = "No suggestion preferences for progression '{progression_id}'."
    INVALID_NAME = "Invalid progression name: {name!r}. Must be 1-{max_length} characters."
    INVALID_CHORD = "Invalid chord: {chord!r}."
    INVALID_KEY = "Invalid key: {key!r}. Expected a tonic like 'C', 'F#m' or 'A minor'."
    POSITION_OUT_OF_RANGE = "Position {position} is out of range for {length} slot(s)."
    INVALID_INSTRUMENT = "Invalid instrument: {instrument!r}. Expected one of {choices}."
    INVALID_SECONDS = "Invalid seconds per chord: {seconds}. Must be between {low:g} and {high:g}."
    INVALID_GENRE = "Invalid genre: {genre!r}. Expected one of {choices}."
    INVALID_COMPLEXITY = "Invalid complexity level: {complexity!r}. Expected one of {choices}."
    INVALID_LENGTH = "Invalid progression length: {length}. Must be between 1 and {maximum}."
    ID_CONFLICT = "Progression id '{progression_id}' already exists."


class SuccessMessages:
    """Standardized success messages."""

    PROGRESSION_DELETED = "Progression '{progression_id}' deleted."
    PLAYBACK_SETTINGS_DELETED = "Playback settings for '{progression_id}' deleted."
    PREFERENCES_DELETED = "Suggestion preferences for '{progression_id}' deleted."
    MIDI_EXPORTED = "Exported progression '{name}' to {path}."
