"""
Tests for core music primitives.

Tests cover:
- PitchClass and Interval (pitch.py)
- ScaleDegree, ScaleType, Key (scale.py)
- ChordQuality, Chord, RomanNumeral (chord.py)
"""

import pytest

from chuk_mcp_chordify.core import (
    Chord,
    ChordQuality,
    Interval,
    Key,
    PitchClass,
    RomanNumeral,
    ScaleDegree,
    ScaleType,
    get_diatonic_chords,
    midi_to_note_name,
)


class TestPitchClass:
    """Tests for PitchClass enum."""

    def test_transpose_wraps(self) -> None:
        """Transposing wraps around the octave."""
        assert PitchClass.B.transpose(1) == PitchClass.C
        assert PitchClass.C.transpose(-1) == PitchClass.B
        assert PitchClass.G.transpose(7) == PitchClass.D

    def test_to_midi(self) -> None:
        """Convert to MIDI note numbers."""
        assert PitchClass.C.to_midi(4) == 60  # Middle C
        assert PitchClass.A.to_midi(4) == 69  # A440
        assert PitchClass.C.to_midi(-1) == 0

    def test_parse(self) -> None:
        """Parse pitch class from string."""
        assert PitchClass.parse("C") == PitchClass.C
        assert PitchClass.parse("C#") == PitchClass.Cs
        assert PitchClass.parse("Db") == PitchClass.Cs  # Enharmonic
        assert PitchClass.parse("Cb") == PitchClass.B
        assert PitchClass.parse("F##") == PitchClass.G

    def test_parse_invalid(self) -> None:
        with pytest.raises(ValueError):
            PitchClass.parse("H")

    def test_spell(self) -> None:
        assert PitchClass.As.spell() == "A#"
        assert PitchClass.As.spell(prefer_flats=True) == "Bb"

    def test_midi_to_note_name(self) -> None:
        assert midi_to_note_name(60) == "C4"
        assert midi_to_note_name(70) == "A#4"
        assert midi_to_note_name(70, prefer_flats=True) == "Bb4"
        assert midi_to_note_name(48) == "C3"


class TestInterval:
    """Tests for Interval."""

    def test_ordering(self) -> None:
        assert Interval.MINOR_THIRD < Interval.MAJOR_THIRD
        assert sorted([Interval.PERFECT_FIFTH, Interval.UNISON]) == [Interval(0), Interval(7)]

    def test_hashable(self) -> None:
        assert len({Interval(4), Interval.MAJOR_THIRD}) == 1


class TestScale:
    """Tests for ScaleType and Key."""

    def test_major_pitches(self) -> None:
        pitches = ScaleType.MAJOR.get_pitches(PitchClass.C)
        assert pitches == [
            PitchClass.C,
            PitchClass.D,
            PitchClass.E,
            PitchClass.F,
            PitchClass.G,
            PitchClass.A,
            PitchClass.B,
        ]

    def test_scale_must_sum_to_octave(self) -> None:
        with pytest.raises(ValueError, match="sum to 12"):
            ScaleType((Interval.MAJOR_SECOND,) * 5)

    def test_scale_degree_range(self) -> None:
        with pytest.raises(ValueError):
            ScaleDegree(8)
        assert str(ScaleDegree(7, -1)) == "b7"

    @pytest.mark.parametrize(
        "name,root,minor",
        [
            ("C", PitchClass.C, False),
            ("Am", PitchClass.A, True),
            ("A minor", PitchClass.A, True),
            ("D_minor", PitchClass.D, True),
            ("Bb maj", PitchClass.As, False),
            ("F# Major", PitchClass.Fs, False),
        ],
    )
    def test_key_parse(self, name: str, root: PitchClass, minor: bool) -> None:
        key = Key.parse(name)
        assert key.root == root
        assert key.is_minor is minor

    @pytest.mark.parametrize("name", ["", "H", "C dorian", "Cm7", "c"])
    def test_key_parse_invalid(self, name: str) -> None:
        with pytest.raises(ValueError):
            Key.parse(name)

    def test_prefers_flats(self) -> None:
        assert Key.parse("F").prefers_flats
        assert Key.parse("Bb").prefers_flats
        assert Key.parse("Dm").prefers_flats  # relative of F
        assert not Key.parse("G").prefers_flats
        assert not Key.parse("Am").prefers_flats
        assert not Key.parse("F#").prefers_flats

    def test_degree_lookup(self) -> None:
        key = Key.parse("G")
        assert key.degree_to_pitch(ScaleDegree(5)) == PitchClass.D
        assert key.pitch_to_degree(PitchClass.Fs) == ScaleDegree(7)
        assert key.pitch_to_degree(PitchClass.F) is None

    def test_str(self) -> None:
        assert str(Key.parse("Eb")) == "Eb major"
        assert str(Key.parse("Am")) == "A minor"


class TestChord:
    """Tests for Chord parsing and rendering."""

    @pytest.mark.parametrize(
        "symbol,quality",
        [
            ("C", ChordQuality.MAJOR),
            ("Am", ChordQuality.MINOR),
            ("Bdim", ChordQuality.DIMINISHED),
            ("Caug", ChordQuality.AUGMENTED),
            ("G7", ChordQuality.DOMINANT_7),
            ("Fmaj7", ChordQuality.MAJOR_7),
            ("Dm7", ChordQuality.MINOR_7),
            ("F#m7b5", ChordQuality.HALF_DIMINISHED_7),
            ("Bbdim7", ChordQuality.DIMINISHED_7),
            ("Dsus2", ChordQuality.SUS2),
            ("Dsus4", ChordQuality.SUS4),
            ("Esus", ChordQuality.SUS4),
            ("C6", ChordQuality.MAJOR_6),
            ("Cadd9", ChordQuality.ADD_9),
            ("G9", ChordQuality.DOMINANT_9),
            ("G13", ChordQuality.DOMINANT_13),
            ("CmMaj7", ChordQuality.MINOR_MAJOR_7),
            ("E5", ChordQuality.POWER),
            ("C-7", ChordQuality.MINOR_7),
            ("CΔ7", ChordQuality.MAJOR_7),
            ("G7b9", ChordQuality.DOMINANT_7_FLAT_9),
            ("C7#9", ChordQuality.DOMINANT_7_SHARP_9),
            ("C7#11", ChordQuality.DOMINANT_7_SHARP_11),
            ("C7b5", ChordQuality.DOMINANT_7_FLAT_5),
            ("C7#5", ChordQuality.DOMINANT_7_SHARP_5),
            ("Cm11", ChordQuality.MINOR_11),
            ("Cmaj13", ChordQuality.MAJOR_13),
            ("C69", ChordQuality.MAJOR_6_9),
            ("Cm(add9)", ChordQuality.MINOR_ADD_9),
        ],
    )
    def test_parse_quality(self, symbol: str, quality: ChordQuality) -> None:
        assert Chord.parse(symbol).quality == quality

    def test_slash_chord(self) -> None:
        chord = Chord.parse("G7/B")
        assert chord.root == PitchClass.G
        assert chord.bass == PitchClass.B
        assert chord.symbol() == "G7/B"

    @pytest.mark.parametrize("symbol", ["Xz9", "H7", "Cfoo", "C/H", "", "C 7"])
    def test_parse_invalid(self, symbol: str) -> None:
        with pytest.raises(ValueError):
            Chord.parse(symbol)

    def test_flat_spelling_kept(self) -> None:
        assert Chord.parse("Bbmaj7").symbol() == "Bbmaj7"
        assert Chord.parse("A#maj7").symbol() == "A#maj7"
        assert Chord.parse("A#maj7").symbol(prefer_flats=True) == "Bbmaj7"

    def test_equality_ignores_spelling(self) -> None:
        assert Chord.parse("Bb") == Chord.parse("A#")

    def test_midi_notes(self) -> None:
        assert Chord.parse("C").get_midi_notes(4) == [60, 64, 67]
        assert Chord.parse("Am7").get_midi_notes(3) == [57, 60, 64, 67]
        assert Chord.parse("Cadd9").get_midi_notes(4) == [60, 64, 67, 74]

    def test_altered_midi_notes(self) -> None:
        assert Chord.parse("G7b9").get_midi_notes(3) == [55, 59, 62, 65, 68]
        assert Chord.parse("C7#5").get_midi_notes(4) == [60, 64, 68, 70]
        assert Chord.parse("Cm(add9)").symbol() == "Cmadd9"


class TestDiatonicChords:
    """Tests for diatonic chord construction."""

    def test_c_major_triads(self) -> None:
        chords = [chord.symbol() for _, chord in get_diatonic_chords(Key.parse("C"))]
        assert chords == ["C", "Dm", "Em", "F", "G", "Am", "Bdim"]

    def test_c_major_sevenths(self) -> None:
        chords = [
            chord.symbol() for _, chord in get_diatonic_chords(Key.parse("C"), sevenths=True)
        ]
        assert chords == ["Cmaj7", "Dm7", "Em7", "Fmaj7", "G7", "Am7", "Bm7b5"]

    def test_a_minor_triads(self) -> None:
        chords = [chord.symbol() for _, chord in get_diatonic_chords(Key.parse("Am"))]
        assert chords == ["Am", "Bdim", "C", "Dm", "Em", "F", "G"]

    def test_flat_key_spelling(self) -> None:
        chords = [chord.symbol() for _, chord in get_diatonic_chords(Key.parse("F"))]
        assert "Bb" in chords
        assert "A#" not in chords

    def test_roman_numerals(self) -> None:
        numerals = [str(numeral) for numeral, _ in get_diatonic_chords(Key.parse("C"))]
        assert numerals == ["I", "ii", "iii", "IV", "V", "vi", "vii°"]

    def test_roman_numeral_resolve(self) -> None:
        numeral = RomanNumeral(ScaleDegree(5), ChordQuality.DOMINANT_7)
        assert numeral.resolve(Key.parse("Bb")).symbol() == "F7"
