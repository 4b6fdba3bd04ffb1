#!/usr/bin/env python3
"""
Example: Build a blues progression, get suggestions and export MIDI.

This drives the stores directly, the same way the MCP tools do.

Usage:
    python examples/blues_progression.py
    # Creates: examples/output/blues.mid
"""

import asyncio
from pathlib import Path

from chuk_mcp_chordify.playback import export_progression, render_progression
from chuk_mcp_chordify.progression import ProgressionManager
from chuk_mcp_chordify.settings import PlaybackSettingsStore, SuggestionPreferencesStore
from chuk_mcp_chordify.suggestion import SuggestionEngine


async def main() -> None:
    """Create, edit, suggest and export."""
    output_dir = Path(__file__).parent / "output"

    manager = ProgressionManager()
    playback = PlaybackSettingsStore(manager)
    preferences = SuggestionPreferencesStore(manager)
    engine = SuggestionEngine()

    # Four bars of blues
    progression = await manager.create("Blues")
    for position, chord in enumerate(["C7", "F7", "G7", "C7"]):
        await manager.add_slot(progression.id)
        await manager.set_chord(progression.id, position, chord)

    # Turnaround first, then drop the second slot
    await manager.reorder_slots(progression.id, 3, 0)
    progression = await manager.delete_slot(progression.id, 1)
    print(f"Slots: {progression.chords()}")

    # Leave a gap and ask what fits
    await manager.add_slot(progression.id)
    prefs = await preferences.initialize(progression.id)
    prefs = await preferences.set_complexity(progression.id, "Advanced")
    prefs = await preferences.set_genre(progression.id, "Jazz")
    progression = await manager.get(progression.id)

    suggestions = engine.suggest_chord(prefs, progression.chords(), progression.slot_count - 1)
    print(f"Suggestions for the last slot: {suggestions[:8]}")
    progression = await manager.set_chord(
        progression.id, progression.slot_count - 1, suggestions[0]
    )

    for number, sequence in enumerate(engine.suggest_progressions(prefs, 4), start=1):
        print(f"Generated {number}: {' - '.join(sequence)}")

    # Render and export
    settings = await playback.initialize(progression.id)
    settings = await playback.set_instrument(progression.id, "Guitar")
    rendered = render_progression(progression.chords(), settings)
    for item in rendered.sequence:
        print(f"  {item.start:4.1f}s {item.chord or '-':6} {' '.join(item.notes)}")

    path = export_progression(progression, settings, output_dir / "blues.mid")
    print(f"\nCreated: {path}")


if __name__ == "__main__":
    asyncio.run(main())
