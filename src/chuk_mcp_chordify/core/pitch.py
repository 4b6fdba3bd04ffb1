"""
Pitch primitives - PitchClass and Interval.

PitchClass is the octave-independent pitch (0-11) that chord roots, bass notes
and key tonics are spelled from. Interval is a distance in semitones; chord
qualities are stacks of intervals measured from the root.
"""

from __future__ import annotations

import re
from enum import IntEnum
from functools import total_ordering
from typing import ClassVar

_SHARP_NAMES: list[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
_FLAT_NAMES: list[str] = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

_NATURALS: dict[str, int] = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}

# Letter plus up to two accidentals, e.g. 'C', 'F#', 'Bb', 'Ebb'
NOTE_PATTERN = re.compile(r"([A-G])(##|bb|#|b)?")


class PitchClass(IntEnum):
    """
    The 12 chromatic pitch classes (0-11).

    Enharmonic equivalents share a value (C# == Db == 1). Spelling is a
    display concern handled by spell().
    """

    C = 0
    Cs = 1  # C# / Db
    D = 2
    Ds = 3  # D# / Eb
    E = 4
    F = 5
    Fs = 6  # F# / Gb
    G = 7
    Gs = 8  # G# / Ab
    A = 9
    As = 10  # A# / Bb
    B = 11

    def transpose(self, semitones: int) -> PitchClass:
        """Transpose by a number of semitones (positive or negative)."""
        return PitchClass((self.value + semitones) % 12)

    def interval_to(self, other: PitchClass) -> Interval:
        """Get the ascending interval from this pitch class to another."""
        return Interval((other.value - self.value) % 12)

    def to_midi(self, octave: int = 4) -> int:
        """Convert to MIDI note number. C4 = 60."""
        return self.value + (octave + 1) * 12

    def spell(self, prefer_flats: bool = False) -> str:
        """Get human-readable name."""
        names = _FLAT_NAMES if prefer_flats else _SHARP_NAMES
        return names[self.value]

    @classmethod
    def from_midi(cls, midi_note: int) -> PitchClass:
        """Extract pitch class from MIDI note number."""
        return cls(midi_note % 12)

    @classmethod
    def parse(cls, name: str) -> PitchClass:
        """
        Parse a pitch class from a note name like 'C', 'C#', 'Db' or 'F##'.

        Raises:
            ValueError: If the name is not a note name
        """
        match = NOTE_PATTERN.fullmatch(name.strip())
        if match is None:
            raise ValueError(f"Unknown pitch class: {name}")

        letter, accidental = match.groups()
        offset = 0
        if accidental:
            offset = len(accidental) if accidental[0] == "#" else -len(accidental)
        return cls((_NATURALS[letter] + offset) % 12)


def midi_to_note_name(midi_note: int, prefer_flats: bool = False) -> str:
    """
    Spell a MIDI note number with its octave, e.g. 60 -> 'C4', 70 -> 'Bb4'.

    Args:
        midi_note: MIDI note number (0-127)
        prefer_flats: Spell black keys with flats

    Returns:
        Note name with octave suffix
    """
    octave = midi_note // 12 - 1
    return f"{PitchClass.from_midi(midi_note).spell(prefer_flats)}{octave}"


@total_ordering
class Interval:
    """
    Distance between pitches in semitones.

    Immutable and hashable. Compound intervals (9ths, 11ths, 13ths) are
    stored as-is so chord voicings keep their register.
    """

    __slots__ = ("_semitones",)
    _semitones: int

    UNISON: ClassVar[Interval]
    MINOR_SECOND: ClassVar[Interval]
    MAJOR_SECOND: ClassVar[Interval]
    MINOR_THIRD: ClassVar[Interval]
    MAJOR_THIRD: ClassVar[Interval]
    PERFECT_FOURTH: ClassVar[Interval]
    TRITONE: ClassVar[Interval]
    PERFECT_FIFTH: ClassVar[Interval]
    MINOR_SIXTH: ClassVar[Interval]
    MAJOR_SIXTH: ClassVar[Interval]
    MINOR_SEVENTH: ClassVar[Interval]
    MAJOR_SEVENTH: ClassVar[Interval]
    OCTAVE: ClassVar[Interval]

    def __init__(self, semitones: int) -> None:
        object.__setattr__(self, "_semitones", semitones)

    @property
    def semitones(self) -> int:
        """Number of semitones in this interval."""
        return self._semitones

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return bool(self._semitones == other._semitones)

    def __lt__(self, other: Interval) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return bool(self._semitones < other._semitones)

    def __hash__(self) -> int:
        return hash(self._semitones)

    def __repr__(self) -> str:
        return f"Interval({self._semitones})"


Interval.UNISON = Interval(0)
Interval.MINOR_SECOND = Interval(1)
Interval.MAJOR_SECOND = Interval(2)
Interval.MINOR_THIRD = Interval(3)
Interval.MAJOR_THIRD = Interval(4)
Interval.PERFECT_FOURTH = Interval(5)
Interval.TRITONE = Interval(6)
Interval.PERFECT_FIFTH = Interval(7)
Interval.MINOR_SIXTH = Interval(8)
Interval.MAJOR_SIXTH = Interval(9)
Interval.MINOR_SEVENTH = Interval(10)
Interval.MAJOR_SEVENTH = Interval(11)
Interval.OCTAVE = Interval(12)
