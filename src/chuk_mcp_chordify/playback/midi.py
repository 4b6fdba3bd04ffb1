"""
MIDI export - a stored progression written as a Standard MIDI File.

Uses the same voicings as the renderer. One chord per slot, each lasting
`seconds_per_chord`; empty slots are rests of the same length.
All operations are deterministic: same input → same file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from mido import Message, MetaMessage, MidiFile, MidiTrack

from chuk_mcp_chordify.constants import INSTRUMENT_PROGRAMS
from chuk_mcp_chordify.playback.renderer import render_progression

if TYPE_CHECKING:
    from collections.abc import Sequence

    from chuk_mcp_chordify.models.progression import Progression
    from chuk_mcp_chordify.models.settings import PlaybackSettings

logger = logging.getLogger(__name__)

TICKS_PER_BEAT = 480
TEMPO_BPM = 120
DEFAULT_VELOCITY = 80


@dataclass(frozen=True)
class MidiEvent:
    """
    A single MIDI note event.

    All times are in ticks (absolute from start of track).
    """

    pitch: int  # MIDI note number (0-127)
    start_ticks: int
    duration_ticks: int
    velocity: int = DEFAULT_VELOCITY
    channel: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.pitch <= 127:
            raise ValueError(f"Pitch must be 0-127, got {self.pitch}")
        if not 0 <= self.velocity <= 127:
            raise ValueError(f"Velocity must be 0-127, got {self.velocity}")
        if self.start_ticks < 0 or self.duration_ticks < 0:
            raise ValueError("Event times must be >= 0")


def seconds_to_ticks(
    seconds: float, tempo_bpm: int = TEMPO_BPM, ticks_per_beat: int = TICKS_PER_BEAT
) -> int:
    """Convert seconds to ticks at a fixed tempo."""
    return round(seconds * tempo_bpm / 60 * ticks_per_beat)


def progression_to_events(
    progression: Progression, settings: PlaybackSettings
) -> list[MidiEvent]:
    """
    Lay a progression out as note events.

    Raises:
        InvalidChordError: If a stored chord no longer parses
    """
    rendered = render_progression(progression.chords(), settings)
    slot_ticks = seconds_to_ticks(settings.seconds_per_chord)

    events = []
    for index, item in enumerate(rendered.sequence):
        for pitch in item.midi_notes:
            events.append(MidiEvent(pitch, index * slot_ticks, slot_ticks))
    return events


def events_to_midi(
    events: Sequence[MidiEvent],
    program: int = 0,
    total_ticks: int = 0,
    tempo_bpm: int = TEMPO_BPM,
    ticks_per_beat: int = TICKS_PER_BEAT,
) -> MidiFile:
    """
    Convert events to a single-track MidiFile.

    Args:
        events: Note events
        program: General MIDI program (0-indexed)
        total_ticks: Minimum track length, so trailing rests are kept
        tempo_bpm: Tempo in beats per minute
        ticks_per_beat: Resolution (default 480)

    Returns:
        A mido MidiFile ready to be saved
    """
    mid = MidiFile(ticks_per_beat=ticks_per_beat)
    track = MidiTrack()
    mid.tracks.append(track)

    track.append(MetaMessage("set_tempo", tempo=int(60_000_000 / tempo_bpm), time=0))
    track.append(Message("program_change", program=program, channel=0, time=0))

    messages: list[tuple[int, Message]] = []
    for event in events:
        messages.append(
            (
                event.start_ticks,
                Message(
                    "note_on",
                    channel=event.channel,
                    note=event.pitch,
                    velocity=event.velocity,
                    time=0,
                ),
            )
        )
        messages.append(
            (
                event.start_ticks + event.duration_ticks,
                Message("note_off", channel=event.channel, note=event.pitch, velocity=0, time=0),
            )
        )

    # note_off before note_on at the same tick so repeated chords re-strike cleanly
    messages.sort(key=lambda x: (x[0], x[1].type != "note_off", x[1].note))

    current_time = 0
    for abs_time, msg in messages:
        msg.time = abs_time - current_time
        track.append(msg)
        current_time = abs_time

    track.append(MetaMessage("end_of_track", time=max(total_ticks - current_time, 0)))
    return mid


def export_progression(
    progression: Progression, settings: PlaybackSettings, path: Path
) -> Path:
    """
    Write a progression to a .mid file.

    Args:
        progression: The progression to export
        settings: Playback settings giving the instrument and chord length
        path: Destination file; parent directories are created

    Returns:
        The written path
    """
    events = progression_to_events(progression, settings)
    total_ticks = progression.slot_count * seconds_to_ticks(settings.seconds_per_chord)
    mid = events_to_midi(events, INSTRUMENT_PROGRAMS[settings.instrument], total_ticks)

    path.parent.mkdir(parents=True, exist_ok=True)
    mid.save(str(path))
    logger.info(f"Exported {progression.id} to {path} ({len(events)} notes)")
    return path
