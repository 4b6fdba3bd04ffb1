"""
Music theory core - the primitives chord validation and suggestion build on.

- PitchClass / Interval: pitch and distance
- ScaleDegree / ScaleType / Key: tonal context for suggestions
- ChordQuality / Chord: chord symbols and their notes
- RomanNumeral: key-independent chord references
- is_valid_chord / is_valid_key: validation predicates used by the stores
"""

from chuk_mcp_chordify.core.chord import Chord, ChordQuality, RomanNumeral, get_diatonic_chords
from chuk_mcp_chordify.core.pitch import Interval, PitchClass, midi_to_note_name
from chuk_mcp_chordify.core.scale import Key, ScaleDegree, ScaleType
from chuk_mcp_chordify.core.theory import is_valid_chord, is_valid_key

__all__ = [
    # Pitch
    "PitchClass",
    "Interval",
    "midi_to_note_name",
    # Scale
    "ScaleDegree",
    "ScaleType",
    "Key",
    # Chord
    "ChordQuality",
    "Chord",
    "RomanNumeral",
    "get_diatonic_chords",
    # Validation
    "is_valid_chord",
    "is_valid_key",
]
