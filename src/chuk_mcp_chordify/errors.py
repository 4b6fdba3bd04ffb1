"""
Domain errors.

Stores raise these; tools turn them into error results so callers can show
them inline. Anything that is not a ChordifyError is a server fault.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar

from chuk_mcp_chordify.constants import ErrorMessages


class ErrorKind(str, Enum):
    """Machine-readable error categories carried in error results."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation_error"
    INVALID_CHORD = "invalid_chord"
    INVALID_KEY = "invalid_key"
    POSITION_OUT_OF_RANGE = "position_out_of_range"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class ChordifyError(Exception):
    """Base class for domain errors. Raising one implies state is unchanged."""

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ChordifyError):
    """Unknown progression, or a settings record that was never initialized."""

    kind = ErrorKind.NOT_FOUND


class ValidationError(ChordifyError):
    """Malformed name, enum value or out-of-range number."""

    kind = ErrorKind.VALIDATION


class InvalidChordError(ValidationError):
    """Chord symbol rejected by the chord validator."""

    kind = ErrorKind.INVALID_CHORD


class InvalidKeyError(ValidationError):
    """Key symbol rejected by the key validator."""

    kind = ErrorKind.INVALID_KEY


class PositionOutOfRangeError(ChordifyError):
    """Slot index outside the progression's current length."""

    kind = ErrorKind.POSITION_OUT_OF_RANGE

    def __init__(self, position: int, length: int):
        message = ErrorMessages.POSITION_OUT_OF_RANGE.format(position=position, length=length)
        super().__init__(message)
        self.position = position
        self.length = length


class ConflictError(ChordifyError):
    """Concurrent or duplicate write that could not be serialized."""

    kind = ErrorKind.CONFLICT
