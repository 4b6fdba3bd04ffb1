"""
Playback renderer - chord symbols to timed notes.

Rendering is stateless: it takes chord symbols and a PlaybackSettings record
and returns voicings plus timing. Nothing here makes sound; the client turns
the notes into audio.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from chuk_mcp_chordify.constants import INSTRUMENT_REGISTERS, ErrorMessages, Instrument
from chuk_mcp_chordify.core.chord import Chord
from chuk_mcp_chordify.core.pitch import midi_to_note_name
from chuk_mcp_chordify.errors import InvalidChordError
from chuk_mcp_chordify.models.settings import PlaybackSettings


class RenderedChord(BaseModel):
    """A single chord voiced for an instrument."""

    chord: str
    notes: list[str] = Field(..., description="Note names with octave, lowest first")
    midi_notes: list[int] = Field(..., description="MIDI note numbers, lowest first")
    instrument: Instrument
    duration: float


class SequenceItem(BaseModel):
    """One slot of a rendered progression. Rests have no chord and no notes."""

    chord: str | None
    notes: list[str] = Field(default_factory=list)
    midi_notes: list[int] = Field(default_factory=list)
    start: float
    duration: float

    @property
    def is_rest(self) -> bool:
        return self.chord is None


class RenderedProgression(BaseModel):
    """A chord sequence laid out back to back."""

    sequence: list[SequenceItem]
    instrument: Instrument
    total_duration: float


def voice_chord(chord: Chord, instrument: Instrument) -> list[int]:
    """
    Voice a chord for an instrument.

    The bass note (root, or the slash bass) sits in the instrument's bass
    octave; the chord tones are stacked from the root in its chord octave.

    Returns:
        Sorted MIDI note numbers without duplicates
    """
    bass_octave, chord_octave = INSTRUMENT_REGISTERS[instrument]
    bass = (chord.bass or chord.root).to_midi(bass_octave)
    upper = chord.get_midi_notes(chord_octave)
    return sorted({bass, *upper})


def _parse(symbol: str) -> Chord:
    try:
        return Chord.parse(symbol)
    except (ValueError, AttributeError):
        raise InvalidChordError(ErrorMessages.INVALID_CHORD.format(chord=symbol)) from None


def render_chord(symbol: str, settings: PlaybackSettings) -> RenderedChord:
    """
    Render one chord with the given settings.

    Raises:
        InvalidChordError: If the symbol is not a valid chord
    """
    chord = _parse(symbol)
    midi_notes = voice_chord(chord, settings.instrument)
    return RenderedChord(
        chord=symbol.strip(),
        notes=[midi_to_note_name(note, chord.flats) for note in midi_notes],
        midi_notes=midi_notes,
        instrument=settings.instrument,
        duration=settings.seconds_per_chord,
    )


def render_progression(
    symbols: list[str | None], settings: PlaybackSettings
) -> RenderedProgression:
    """
    Render a chord sequence, one chord per `seconds_per_chord`.

    None entries become rests of the same length. Every chord is validated
    before anything is rendered.

    Raises:
        InvalidChordError: If any non-empty entry is not a valid chord
    """
    chords = [None if symbol is None else _parse(symbol) for symbol in symbols]
    duration = settings.seconds_per_chord

    sequence = []
    for index, (symbol, chord) in enumerate(zip(symbols, chords, strict=True)):
        start = index * duration
        if chord is None or symbol is None:
            sequence.append(SequenceItem(chord=None, start=start, duration=duration))
            continue
        midi_notes = voice_chord(chord, settings.instrument)
        sequence.append(
            SequenceItem(
                chord=symbol.strip(),
                notes=[midi_to_note_name(note, chord.flats) for note in midi_notes],
                midi_notes=midi_notes,
                start=start,
                duration=duration,
            )
        )

    return RenderedProgression(
        sequence=sequence,
        instrument=settings.instrument,
        total_duration=len(sequence) * duration,
    )
