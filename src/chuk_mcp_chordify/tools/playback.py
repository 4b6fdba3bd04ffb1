"""
Playback tools - MCP tools for playback settings, rendering and MIDI export.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from chuk_mcp_chordify.constants import SuccessMessages
from chuk_mcp_chordify.errors import ChordifyError
from chuk_mcp_chordify.models.result import err, ok
from chuk_mcp_chordify.playback import export_progression, render_chord, render_progression
from chuk_mcp_chordify.progression import ProgressionManager
from chuk_mcp_chordify.settings import PlaybackSettingsStore

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def _midi_filename(filename: str | None, fallback: str) -> str:
    """Reduce a requested filename to a bare '<stem>.mid' inside the output dir."""
    stem = Path(filename).name if filename else ""
    if stem.endswith(".mid"):
        stem = stem[: -len(".mid")]
    return f"{stem or fallback}.mid"


def register_playback_tools(
    mcp: ChukMCPServer,
    manager: ProgressionManager,
    settings: PlaybackSettingsStore,
    output_dir: Path,
) -> dict[str, Any]:
    """
    Register playback tools with the MCP server.

    Args:
        mcp: The MCP server instance
        manager: The progression manager
        settings: The playback settings store
        output_dir: Directory for exported MIDI files

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_initialize_playback_settings(progression_id: str) -> str:
        """
        Create playback settings for a progression (Piano, 2 seconds per chord).

        Calling this again keeps the existing settings unchanged.

        Args:
            progression_id: Progression id

        Returns:
            JSON string with the playback settings
        """
        try:
            record = await settings.initialize(progression_id)
            return ok(settings=record.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to initialize playback settings for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to initialize playback settings")
            return err(e)

    tools["chordify_initialize_playback_settings"] = chordify_initialize_playback_settings

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_set_instrument(progression_id: str, instrument: str) -> str:
        """
        Set the playback instrument.

        Args:
            progression_id: Progression id
            instrument: 'Piano', 'Guitar' or 'Synthesizer' (case-insensitive)

        Returns:
            JSON string with the updated playback settings
        """
        try:
            record = await settings.set_instrument(progression_id, instrument)
            return ok(settings=record.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to set instrument for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to set instrument")
            return err(e)

    tools["chordify_set_instrument"] = chordify_set_instrument

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_set_seconds_per_chord(progression_id: str, seconds_per_chord: float) -> str:
        """
        Set how long each chord plays.

        Args:
            progression_id: Progression id
            seconds_per_chord: Duration in seconds (1-10)

        Returns:
            JSON string with the updated playback settings
        """
        try:
            record = await settings.set_seconds_per_chord(progression_id, seconds_per_chord)
            return ok(settings=record.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to set seconds per chord for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to set seconds per chord")
            return err(e)

    tools["chordify_set_seconds_per_chord"] = chordify_set_seconds_per_chord

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_get_playback_settings(progression_id: str) -> str:
        """
        Get the playback settings of a progression.

        Args:
            progression_id: Progression id

        Returns:
            JSON string with the playback settings
        """
        try:
            record = await settings.get(progression_id)
            return ok(settings=record.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to get playback settings for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to get playback settings")
            return err(e)

    tools["chordify_get_playback_settings"] = chordify_get_playback_settings

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_delete_playback_settings(progression_id: str) -> str:
        """
        Delete the playback settings of a progression.

        Args:
            progression_id: Progression id

        Returns:
            JSON string with a confirmation message
        """
        try:
            await settings.delete(progression_id)
            return ok(
                message=SuccessMessages.PLAYBACK_SETTINGS_DELETED.format(
                    progression_id=progression_id
                )
            )
        except ChordifyError as e:
            logger.warning(f"Failed to delete playback settings for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to delete playback settings")
            return err(e)

    tools["chordify_delete_playback_settings"] = chordify_delete_playback_settings

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_play_chord(progression_id: str, chord: str) -> str:
        """
        Render one chord with a progression's playback settings.

        Args:
            progression_id: Progression whose settings to use
            chord: Chord symbol, e.g. 'Cmaj7'

        Returns:
            JSON string with note names, MIDI notes, instrument and duration

        Example:
            chordify_play_chord(progression_id="...", chord="Am7")
        """
        try:
            record = await settings.get(progression_id)
            rendered = render_chord(chord, record)
            return ok(**rendered.model_dump(mode="json", exclude={"chord"}))
        except ChordifyError as e:
            logger.warning(f"Failed to play chord for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to play chord")
            return err(e)

    tools["chordify_play_chord"] = chordify_play_chord

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_play_progression(
        progression_id: str,
        chord_sequence: list[str | None],
    ) -> str:
        """
        Render a chord sequence with a progression's playback settings.

        Args:
            progression_id: Progression whose settings to use
            chord_sequence: Chord symbols in order; null entries are rests

        Returns:
            JSON string with the timed sequence, instrument and total duration

        Example:
            chordify_play_progression(progression_id="...", chord_sequence=["C", "G", "Am", "F"])
        """
        try:
            record = await settings.get(progression_id)
            rendered = render_progression(chord_sequence, record)
            return ok(**rendered.model_dump(mode="json"))
        except ChordifyError as e:
            logger.warning(f"Failed to play progression for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to play progression")
            return err(e)

    tools["chordify_play_progression"] = chordify_play_progression

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_export_midi(progression_id: str, filename: str | None = None) -> str:
        """
        Export a stored progression to a MIDI file.

        Each slot lasts `seconds_per_chord` at 120 BPM; empty slots are rests.
        The instrument chooses the General MIDI program.

        Args:
            progression_id: Progression id (must have playback settings)
            filename: Optional output filename (default: the progression id)

        Returns:
            JSON string with the path of the written file
        """
        try:
            progression = await manager.get(progression_id)
            record = await settings.get(progression_id)
            path = output_dir / _midi_filename(filename, progression.id)
            export_progression(progression, record, path)
            return ok(
                path=str(path),
                message=SuccessMessages.MIDI_EXPORTED.format(name=progression.name, path=path),
            )
        except ChordifyError as e:
            logger.warning(f"Failed to export {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to export MIDI")
            return err(e)

    tools["chordify_export_midi"] = chordify_export_midi

    return tools
