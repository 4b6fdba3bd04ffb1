"""
Scale primitives - ScaleDegree, ScaleType, Key.

Keys are what suggestion preferences are expressed in. A key is a tonic
pitch plus a major or natural-minor scale, and resolves scale degrees to
pitches so chord roots can be placed functionally.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from .pitch import NOTE_PATTERN, Interval, PitchClass

# Pitch classes of the major keys conventionally spelled with flats
_FLAT_MAJOR_ROOTS = frozenset({1, 3, 5, 6, 8, 10})

_MODE_WORDS: dict[str, str] = {
    "major": "major",
    "maj": "major",
    "ionian": "major",
    "minor": "minor",
    "min": "minor",
    "aeolian": "minor",
    "natural_minor": "minor",
    "natural minor": "minor",
}

_KEY_PATTERN = re.compile(rf"(?P<tonic>{NOTE_PATTERN.pattern})(?:(?P<m>m)|[ _]+(?P<mode>.+))?")


@dataclass(frozen=True)
class ScaleDegree:
    """
    A scale degree with optional alteration.

    Degree is 1-7 (tonic to leading tone).
    Alteration is semitones: -1 = flat, +1 = sharp, 0 = natural.
    """

    degree: int  # 1-7
    alteration: int = 0

    def __post_init__(self) -> None:
        if not 1 <= self.degree <= 7:
            raise ValueError(f"Degree must be 1-7, got {self.degree}")

    def __str__(self) -> str:
        if self.alteration == 0:
            return str(self.degree)
        accidental = "#" if self.alteration > 0 else "b"
        return accidental * abs(self.alteration) + str(self.degree)


@dataclass(frozen=True)
class ScaleType:
    """
    A scale defined by its step pattern (intervals between adjacent degrees).

    Immutable and hashable.
    """

    intervals: tuple[Interval, ...]
    name: str = ""

    MAJOR: ClassVar[ScaleType]
    NATURAL_MINOR: ClassVar[ScaleType]

    def __post_init__(self) -> None:
        total = sum(i.semitones for i in self.intervals)
        if total != 12:
            raise ValueError(f"Scale intervals must sum to 12 semitones, got {total}")

    def degree_to_semitones(self, degree: ScaleDegree) -> int:
        """Get semitones from root to a scale degree."""
        semitones = sum(self.intervals[i].semitones for i in range(degree.degree - 1))
        return semitones + degree.alteration

    def get_pitches(self, root: PitchClass) -> list[PitchClass]:
        """Get the 7 pitch classes of this scale starting from root."""
        pitches = [root]
        current = root
        for interval in self.intervals[:-1]:
            current = current.transpose(interval.semitones)
            pitches.append(current)
        return pitches

    def __str__(self) -> str:
        return self.name or f"ScaleType({self.intervals})"


_M2 = Interval.MAJOR_SECOND
_m2 = Interval.MINOR_SECOND

ScaleType.MAJOR = ScaleType((_M2, _M2, _m2, _M2, _M2, _M2, _m2), "major")
ScaleType.NATURAL_MINOR = ScaleType((_M2, _m2, _M2, _M2, _m2, _M2, _M2), "minor")


@dataclass(frozen=True)
class Key:
    """
    A tonic pitch class plus a major or minor scale.

    Examples:
        Key.parse("C") = C major
        Key.parse("Am") = A minor
        Key.parse("D_minor") = D minor
        Key.parse("Bb major") = Bb major
    """

    root: PitchClass
    scale: ScaleType
    accidental: str = ""  # how the tonic was spelled, drives flat/sharp spelling

    @property
    def is_minor(self) -> bool:
        return self.scale == ScaleType.NATURAL_MINOR

    @property
    def prefers_flats(self) -> bool:
        """True if chords in this key are conventionally spelled with flats."""
        if self.accidental:
            return self.accidental.startswith("b")
        relative_major = self.root.transpose(3) if self.is_minor else self.root
        return relative_major.value in _FLAT_MAJOR_ROOTS

    def degree_to_pitch(self, degree: ScaleDegree) -> PitchClass:
        """Resolve a scale degree to a pitch class."""
        return self.root.transpose(self.scale.degree_to_semitones(degree))

    def pitch_to_degree(self, pitch: PitchClass) -> ScaleDegree | None:
        """
        Get the scale degree for a pitch class, if it's in the scale.

        Returns None for pitches outside the key.
        """
        for i, p in enumerate(self.get_pitches()):
            if p == pitch:
                return ScaleDegree(i + 1)
        return None

    def get_pitches(self) -> list[PitchClass]:
        """Get all pitch classes in this key."""
        return self.scale.get_pitches(self.root)

    def __str__(self) -> str:
        return f"{self.root.spell(self.prefers_flats)} {self.scale.name}"

    @classmethod
    def parse(cls, name: str) -> Key:
        """
        Parse a key from a tonic with an optional mode.

        Accepts a bare tonic ('C', 'F#', 'Bb' - major), an 'm' suffix ('Am'),
        or a tonic and mode separated by a space or underscore ('A minor',
        'D_minor', 'Eb maj').

        Raises:
            ValueError: If the name is not a major or minor key
        """
        match = _KEY_PATTERN.fullmatch(name.strip())
        if match is None:
            raise ValueError(f"Invalid key format: {name}")

        root = PitchClass.parse(match.group("tonic"))
        accidental = match.group("tonic")[1:]

        if match.group("m"):
            mode = "minor"
        elif match.group("mode"):
            mode_word = match.group("mode").strip().lower()
            if mode_word not in _MODE_WORDS:
                raise ValueError(f"Unknown key mode: {mode_word}")
            mode = _MODE_WORDS[mode_word]
        else:
            mode = "major"

        scale = ScaleType.NATURAL_MINOR if mode == "minor" else ScaleType.MAJOR
        return cls(root, scale, accidental)
