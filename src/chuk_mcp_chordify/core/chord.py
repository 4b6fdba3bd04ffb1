"""
Chord primitives - ChordQuality, Chord, RomanNumeral.

Chords are stacks of intervals over a root. ChordQuality carries the interval
stack and the canonical symbol suffix, so a Chord round-trips through its
lead-sheet symbol ('C7', 'F#m7b5', 'Bb/D').
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import ClassVar

from .pitch import NOTE_PATTERN, Interval, PitchClass
from .scale import Key, ScaleDegree


@dataclass(frozen=True)
class ChordQuality:
    """
    A chord quality defined by its intervals from the root.

    Intervals are measured from the root, not stacked. A major triad is
    root + M3 + P5 (0, 4, 7 semitones).

    Immutable and hashable.
    """

    intervals: frozenset[Interval]
    name: str = ""
    symbol: str = ""  # canonical suffix written after the root

    MAJOR: ClassVar[ChordQuality]
    MINOR: ClassVar[ChordQuality]
    DIMINISHED: ClassVar[ChordQuality]
    AUGMENTED: ClassVar[ChordQuality]
    POWER: ClassVar[ChordQuality]
    MAJOR_7: ClassVar[ChordQuality]
    MINOR_7: ClassVar[ChordQuality]
    DOMINANT_7: ClassVar[ChordQuality]
    DIMINISHED_7: ClassVar[ChordQuality]
    HALF_DIMINISHED_7: ClassVar[ChordQuality]
    MINOR_MAJOR_7: ClassVar[ChordQuality]
    SUS2: ClassVar[ChordQuality]
    SUS4: ClassVar[ChordQuality]
    DOMINANT_7_SUS4: ClassVar[ChordQuality]
    MAJOR_6: ClassVar[ChordQuality]
    MINOR_6: ClassVar[ChordQuality]
    ADD_9: ClassVar[ChordQuality]
    DOMINANT_9: ClassVar[ChordQuality]
    MAJOR_9: ClassVar[ChordQuality]
    MINOR_9: ClassVar[ChordQuality]
    DOMINANT_11: ClassVar[ChordQuality]
    DOMINANT_13: ClassVar[ChordQuality]
    MAJOR_6_9: ClassVar[ChordQuality]
    MINOR_6_9: ClassVar[ChordQuality]
    MINOR_ADD_9: ClassVar[ChordQuality]
    DOMINANT_9_SUS4: ClassVar[ChordQuality]
    MINOR_11: ClassVar[ChordQuality]
    MINOR_13: ClassVar[ChordQuality]
    MAJOR_13: ClassVar[ChordQuality]
    MAJOR_7_SHARP_11: ClassVar[ChordQuality]
    DOMINANT_7_FLAT_5: ClassVar[ChordQuality]
    DOMINANT_7_SHARP_5: ClassVar[ChordQuality]
    DOMINANT_7_FLAT_9: ClassVar[ChordQuality]
    DOMINANT_7_SHARP_9: ClassVar[ChordQuality]
    DOMINANT_7_SHARP_11: ClassVar[ChordQuality]
    DOMINANT_7_FLAT_13: ClassVar[ChordQuality]

    @classmethod
    def from_symbol(cls, suffix: str) -> ChordQuality:
        """
        Look up a quality by its suffix, accepting common aliases.

        Raises:
            ValueError: If the suffix is not a known chord quality
        """
        quality = _QUALITIES_BY_SUFFIX.get(suffix)
        if quality is None:
            raise ValueError(f"Unknown chord quality: {suffix!r}")
        return quality

    @classmethod
    def from_semitones(cls, semitones: frozenset[int]) -> ChordQuality | None:
        """Find the quality whose interval stack matches, if any."""
        return _QUALITIES_BY_SEMITONES.get(semitones)

    def get_pitches(self, root: PitchClass) -> list[PitchClass]:
        """Get all pitch classes in this chord, sorted by interval."""
        sorted_intervals = sorted(self.intervals)
        return [root.transpose(interval.semitones) for interval in sorted_intervals]

    def get_midi_notes(self, root_midi: int) -> list[int]:
        """Get MIDI note numbers for this chord, sorted ascending."""
        return [root_midi + interval.semitones for interval in sorted(self.intervals)]

    def __str__(self) -> str:
        return self.name or f"ChordQuality({self.intervals})"


def _quality(semitones: tuple[int, ...], name: str, symbol: str) -> ChordQuality:
    return ChordQuality(frozenset(Interval(s) for s in semitones), name, symbol)


ChordQuality.MAJOR = _quality((0, 4, 7), "major", "")
ChordQuality.MINOR = _quality((0, 3, 7), "minor", "m")
ChordQuality.DIMINISHED = _quality((0, 3, 6), "diminished", "dim")
ChordQuality.AUGMENTED = _quality((0, 4, 8), "augmented", "aug")
ChordQuality.POWER = _quality((0, 7), "power", "5")
ChordQuality.MAJOR_7 = _quality((0, 4, 7, 11), "major 7", "maj7")
ChordQuality.MINOR_7 = _quality((0, 3, 7, 10), "minor 7", "m7")
ChordQuality.DOMINANT_7 = _quality((0, 4, 7, 10), "dominant 7", "7")
ChordQuality.DIMINISHED_7 = _quality((0, 3, 6, 9), "diminished 7", "dim7")
ChordQuality.HALF_DIMINISHED_7 = _quality((0, 3, 6, 10), "half-diminished 7", "m7b5")
ChordQuality.MINOR_MAJOR_7 = _quality((0, 3, 7, 11), "minor major 7", "mMaj7")
ChordQuality.SUS2 = _quality((0, 2, 7), "sus2", "sus2")
ChordQuality.SUS4 = _quality((0, 5, 7), "sus4", "sus4")
ChordQuality.DOMINANT_7_SUS4 = _quality((0, 5, 7, 10), "dominant 7 sus4", "7sus4")
ChordQuality.MAJOR_6 = _quality((0, 4, 7, 9), "major 6", "6")
ChordQuality.MINOR_6 = _quality((0, 3, 7, 9), "minor 6", "m6")
ChordQuality.ADD_9 = _quality((0, 4, 7, 14), "add 9", "add9")
ChordQuality.DOMINANT_9 = _quality((0, 4, 7, 10, 14), "dominant 9", "9")
ChordQuality.MAJOR_9 = _quality((0, 4, 7, 11, 14), "major 9", "maj9")
ChordQuality.MINOR_9 = _quality((0, 3, 7, 10, 14), "minor 9", "m9")
ChordQuality.DOMINANT_11 = _quality((0, 4, 7, 10, 14, 17), "dominant 11", "11")
ChordQuality.DOMINANT_13 = _quality((0, 4, 7, 10, 14, 21), "dominant 13", "13")
ChordQuality.MAJOR_6_9 = _quality((0, 4, 7, 9, 14), "major 6/9", "69")
ChordQuality.MINOR_6_9 = _quality((0, 3, 7, 9, 14), "minor 6/9", "m69")
ChordQuality.MINOR_ADD_9 = _quality((0, 3, 7, 14), "minor add 9", "madd9")
ChordQuality.DOMINANT_9_SUS4 = _quality((0, 5, 7, 10, 14), "dominant 9 sus4", "9sus4")
ChordQuality.MINOR_11 = _quality((0, 3, 7, 10, 14, 17), "minor 11", "m11")
ChordQuality.MINOR_13 = _quality((0, 3, 7, 10, 14, 21), "minor 13", "m13")
ChordQuality.MAJOR_13 = _quality((0, 4, 7, 11, 14, 21), "major 13", "maj13")
ChordQuality.MAJOR_7_SHARP_11 = _quality((0, 4, 7, 11, 18), "major 7 #11", "maj7#11")

# Altered dominants
ChordQuality.DOMINANT_7_FLAT_5 = _quality((0, 4, 6, 10), "dominant 7 b5", "7b5")
ChordQuality.DOMINANT_7_SHARP_5 = _quality((0, 4, 8, 10), "dominant 7 #5", "7#5")
ChordQuality.DOMINANT_7_FLAT_9 = _quality((0, 4, 7, 10, 13), "dominant 7 b9", "7b9")
ChordQuality.DOMINANT_7_SHARP_9 = _quality((0, 4, 7, 10, 15), "dominant 7 #9", "7#9")
ChordQuality.DOMINANT_7_SHARP_11 = _quality((0, 4, 7, 10, 18), "dominant 7 #11", "7#11")
ChordQuality.DOMINANT_7_FLAT_13 = _quality((0, 4, 7, 10, 20), "dominant 7 b13", "7b13")

_ALL_QUALITIES: tuple[ChordQuality, ...] = (
    ChordQuality.MAJOR,
    ChordQuality.MINOR,
    ChordQuality.DIMINISHED,
    ChordQuality.AUGMENTED,
    ChordQuality.POWER,
    ChordQuality.MAJOR_7,
    ChordQuality.MINOR_7,
    ChordQuality.DOMINANT_7,
    ChordQuality.DIMINISHED_7,
    ChordQuality.HALF_DIMINISHED_7,
    ChordQuality.MINOR_MAJOR_7,
    ChordQuality.SUS2,
    ChordQuality.SUS4,
    ChordQuality.DOMINANT_7_SUS4,
    ChordQuality.MAJOR_6,
    ChordQuality.MINOR_6,
    ChordQuality.ADD_9,
    ChordQuality.DOMINANT_9,
    ChordQuality.MAJOR_9,
    ChordQuality.MINOR_9,
    ChordQuality.DOMINANT_11,
    ChordQuality.DOMINANT_13,
    ChordQuality.MAJOR_6_9,
    ChordQuality.MINOR_6_9,
    ChordQuality.MINOR_ADD_9,
    ChordQuality.DOMINANT_9_SUS4,
    ChordQuality.MINOR_11,
    ChordQuality.MINOR_13,
    ChordQuality.MAJOR_13,
    ChordQuality.MAJOR_7_SHARP_11,
    ChordQuality.DOMINANT_7_FLAT_5,
    ChordQuality.DOMINANT_7_SHARP_5,
    ChordQuality.DOMINANT_7_FLAT_9,
    ChordQuality.DOMINANT_7_SHARP_9,
    ChordQuality.DOMINANT_7_SHARP_11,
    ChordQuality.DOMINANT_7_FLAT_13,
)

_QUALITIES_BY_SUFFIX: dict[str, ChordQuality] = {q.symbol: q for q in _ALL_QUALITIES}
_QUALITIES_BY_SUFFIX.update(
    {
        "M": ChordQuality.MAJOR,
        "maj": ChordQuality.MAJOR,
        "min": ChordQuality.MINOR,
        "-": ChordQuality.MINOR,
        "°": ChordQuality.DIMINISHED,
        "o": ChordQuality.DIMINISHED,
        "+": ChordQuality.AUGMENTED,
        "M7": ChordQuality.MAJOR_7,
        "Δ": ChordQuality.MAJOR_7,
        "Δ7": ChordQuality.MAJOR_7,
        "min7": ChordQuality.MINOR_7,
        "-7": ChordQuality.MINOR_7,
        "°7": ChordQuality.DIMINISHED_7,
        "o7": ChordQuality.DIMINISHED_7,
        "ø": ChordQuality.HALF_DIMINISHED_7,
        "ø7": ChordQuality.HALF_DIMINISHED_7,
        "min7b5": ChordQuality.HALF_DIMINISHED_7,
        "mM7": ChordQuality.MINOR_MAJOR_7,
        "m(maj7)": ChordQuality.MINOR_MAJOR_7,
        "sus": ChordQuality.SUS4,
        "M9": ChordQuality.MAJOR_9,
        "min9": ChordQuality.MINOR_9,
        "m(add9)": ChordQuality.MINOR_ADD_9,
        "min11": ChordQuality.MINOR_11,
        "M13": ChordQuality.MAJOR_13,
        "maj7(#11)": ChordQuality.MAJOR_7_SHARP_11,
        "7(b9)": ChordQuality.DOMINANT_7_FLAT_9,
        "7(#9)": ChordQuality.DOMINANT_7_SHARP_9,
        "7(#11)": ChordQuality.DOMINANT_7_SHARP_11,
        "7(b5)": ChordQuality.DOMINANT_7_FLAT_5,
        "7(#5)": ChordQuality.DOMINANT_7_SHARP_5,
        "aug7": ChordQuality.DOMINANT_7_SHARP_5,
        "+7": ChordQuality.DOMINANT_7_SHARP_5,
    }
)

_QUALITIES_BY_SEMITONES: dict[frozenset[int], ChordQuality] = {
    frozenset(i.semitones for i in q.intervals): q for q in _ALL_QUALITIES
}

_CHORD_PATTERN = re.compile(
    rf"(?P<root>{NOTE_PATTERN.pattern})(?P<suffix>[^/\s]*)(?:/(?P<bass>{NOTE_PATTERN.pattern}))?"
)


@dataclass(frozen=True)
class Chord:
    """
    A concrete chord with a root pitch and quality.

    The optional bass makes a slash chord. `flats` only affects spelling and
    is ignored for equality.
    """

    root: PitchClass
    quality: ChordQuality
    bass: PitchClass | None = None
    flats: bool = field(default=False, compare=False)

    @classmethod
    def parse(cls, symbol: str) -> Chord:
        """
        Parse a lead-sheet chord symbol like 'C', 'F#m7', 'Bbmaj7', 'G7/B'.

        Raises:
            ValueError: If the symbol is not a recognised chord
        """
        match = _CHORD_PATTERN.fullmatch(symbol.strip())
        if match is None:
            raise ValueError(f"Invalid chord symbol: {symbol!r}")

        root_name = match.group("root")
        quality = ChordQuality.from_symbol(match.group("suffix"))
        bass_name = match.group("bass")
        bass = PitchClass.parse(bass_name) if bass_name else None
        return cls(
            root=PitchClass.parse(root_name),
            quality=quality,
            bass=bass,
            flats="b" in root_name[1:],
        )

    def get_pitches(self) -> list[PitchClass]:
        """Get all pitch classes in this chord."""
        return self.quality.get_pitches(self.root)

    def get_midi_notes(self, octave: int = 4) -> list[int]:
        """Get MIDI note numbers with the root in the given octave."""
        return self.quality.get_midi_notes(self.root.to_midi(octave))

    def symbol(self, prefer_flats: bool | None = None) -> str:
        """Render the chord symbol, optionally forcing flat spelling."""
        flats = self.flats if prefer_flats is None else prefer_flats
        result = f"{self.root.spell(flats)}{self.quality.symbol}"
        if self.bass is not None and self.bass != self.root:
            result += f"/{self.bass.spell(flats)}"
        return result

    def __str__(self) -> str:
        return self.symbol()


@dataclass(frozen=True)
class RomanNumeral:
    """
    A key-independent chord reference.

    Case carries the third (upper = major, lower = minor); suffixes carry the
    rest ('°', '+', '7', 'Δ7', 'ø7').
    """

    degree: ScaleDegree
    quality: ChordQuality

    def resolve(self, key: Key) -> Chord:
        """Resolve this Roman numeral to a concrete chord in a key."""
        return Chord(key.degree_to_pitch(self.degree), self.quality, flats=key.prefers_flats)

    def __str__(self) -> str:
        numerals = {1: "I", 2: "II", 3: "III", 4: "IV", 5: "V", 6: "VI", 7: "VII"}
        base = numerals[self.degree.degree]

        if self.degree.alteration < 0:
            base = "b" * abs(self.degree.alteration) + base
        elif self.degree.alteration > 0:
            base = "#" * self.degree.alteration + base

        minor_third = any(i.semitones == 3 for i in self.quality.intervals)
        if minor_third:
            base = base.lower()

        suffixes = {
            ChordQuality.DIMINISHED: "°",
            ChordQuality.AUGMENTED: "+",
            ChordQuality.DOMINANT_7: "7",
            ChordQuality.MINOR_7: "7",
            ChordQuality.MAJOR_7: "Δ7",
            ChordQuality.HALF_DIMINISHED_7: "ø7",
            ChordQuality.DIMINISHED_7: "°7",
        }
        return base + suffixes.get(self.quality, "")


def get_diatonic_chords(key: Key, sevenths: bool = False) -> list[tuple[RomanNumeral, Chord]]:
    """
    Build the diatonic chord on every degree of a key by stacking thirds.

    Args:
        key: The key
        sevenths: Stack four notes instead of three

    Returns:
        List of (roman numeral, chord) tuples, degree 1 first
    """
    pitches = key.get_pitches()
    stack = (0, 2, 4, 6) if sevenths else (0, 2, 4)
    result = []
    for index in range(7):
        root = pitches[index]
        semitones = frozenset(
            root.interval_to(pitches[(index + step) % 7]).semitones for step in stack
        )
        quality = ChordQuality.from_semitones(semitones)
        if quality is None:
            raise ValueError(f"No chord quality for intervals {sorted(semitones)}")
        numeral = RomanNumeral(ScaleDegree(index + 1), quality)
        result.append((numeral, numeral.resolve(key)))
    return result
