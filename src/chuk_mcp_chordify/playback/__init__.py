"""
Playback - voicings, timing and MIDI export.

This module provides:
- render_chord / render_progression: chord symbols to timed notes
- export_progression: a stored progression to a .mid file (mido)
"""

from chuk_mcp_chordify.playback.midi import (
    TEMPO_BPM,
    TICKS_PER_BEAT,
    MidiEvent,
    events_to_midi,
    export_progression,
    progression_to_events,
    seconds_to_ticks,
)
from chuk_mcp_chordify.playback.renderer import (
    RenderedChord,
    RenderedProgression,
    SequenceItem,
    render_chord,
    render_progression,
    voice_chord,
)

__all__ = [
    "TEMPO_BPM",
    "TICKS_PER_BEAT",
    "MidiEvent",
    "RenderedChord",
    "RenderedProgression",
    "SequenceItem",
    "events_to_midi",
    "export_progression",
    "progression_to_events",
    "render_chord",
    "render_progression",
    "seconds_to_ticks",
    "voice_chord",
]
