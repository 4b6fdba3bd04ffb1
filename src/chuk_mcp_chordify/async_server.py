#!/usr/bin/env python3
"""
Async Chordify MCP Server using chuk-mcp-server

This server is the backend for a chord progression editor. A progression is
an ordered list of slots, each holding a chord or nothing, and every edit is
addressed by slot position.

The server provides tools for:
- Creating, renaming and deleting progressions
- Adding, filling, clearing, removing and reordering slots
- Playback settings (instrument, seconds per chord) and rendering to notes
- Suggestion preferences (genre, complexity, key) and chord suggestions
- Exporting progressions to MIDI files
"""

import logging
from dataclasses import dataclass
from typing import Any

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_chordify.config import ChordifyConfig
from chuk_mcp_chordify.progression import ProgressionManager
from chuk_mcp_chordify.settings import PlaybackSettingsStore, SuggestionPreferencesStore
from chuk_mcp_chordify.storage import YamlRecordStore
from chuk_mcp_chordify.suggestion import SuggestionEngine
from chuk_mcp_chordify.tools import (
    register_playback_tools,
    register_progression_tools,
    register_suggestion_tools,
)

config = ChordifyConfig.from_env()

logging.basicConfig(level=config.log_level)
logging.getLogger().setLevel(config.log_level)
logger = logging.getLogger(__name__)


@dataclass
class Components:
    """The stores and engine behind the tools."""

    progressions: ProgressionManager
    playback: PlaybackSettingsStore
    preferences: SuggestionPreferencesStore
    engine: SuggestionEngine


def build_components(config: ChordifyConfig) -> Components:
    """
    Create the stores from configuration and load persisted records.

    Settings stores are registered with the progression manager for cascade
    delete in construction order: playback first, then preferences.
    """

    def storage(name: str) -> YamlRecordStore | None:
        if config.data_dir is None:
            return None
        return YamlRecordStore(config.data_dir / name, f".{name}.yaml")

    progressions = ProgressionManager(storage("progressions"))
    playback = PlaybackSettingsStore(
        progressions,
        storage("playback"),
        default_instrument=config.default_instrument,
        default_seconds_per_chord=config.default_seconds_per_chord,
    )
    preferences = SuggestionPreferencesStore(
        progressions,
        storage("preferences"),
        default_genre=config.default_genre,
        default_complexity=config.default_complexity,
        default_key=config.default_key,
    )

    progressions.load()
    playback.load()
    preferences.load()

    return Components(progressions, playback, preferences, SuggestionEngine())


def register_all_tools(
    mcp: ChukMCPServer, components: Components, config: ChordifyConfig
) -> dict[str, Any]:
    """Register every tool and return them by name."""
    tools: dict[str, Any] = {}
    tools.update(register_progression_tools(mcp, components.progressions))
    tools.update(
        register_playback_tools(
            mcp, components.progressions, components.playback, config.output_dir
        )
    )
    tools.update(register_suggestion_tools(mcp, components.preferences, components.engine))
    return tools


# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-chordify")

components = build_components(config)
tools = register_all_tools(mcp, components, config)

# Export tool functions for direct access
chordify_create_progression = tools["chordify_create_progression"]
chordify_add_slot = tools["chordify_add_slot"]
chordify_set_chord = tools["chordify_set_chord"]
chordify_delete_chord = tools["chordify_delete_chord"]
chordify_delete_slot = tools["chordify_delete_slot"]
chordify_reorder_slots = tools["chordify_reorder_slots"]
chordify_rename_progression = tools["chordify_rename_progression"]
chordify_delete_progression = tools["chordify_delete_progression"]
chordify_get_progression = tools["chordify_get_progression"]
chordify_list_progressions = tools["chordify_list_progressions"]

chordify_initialize_playback_settings = tools["chordify_initialize_playback_settings"]
chordify_set_instrument = tools["chordify_set_instrument"]
chordify_set_seconds_per_chord = tools["chordify_set_seconds_per_chord"]
chordify_get_playback_settings = tools["chordify_get_playback_settings"]
chordify_delete_playback_settings = tools["chordify_delete_playback_settings"]
chordify_play_chord = tools["chordify_play_chord"]
chordify_play_progression = tools["chordify_play_progression"]
chordify_export_midi = tools["chordify_export_midi"]

chordify_initialize_preferences = tools["chordify_initialize_preferences"]
chordify_set_genre = tools["chordify_set_genre"]
chordify_set_complexity = tools["chordify_set_complexity"]
chordify_set_key = tools["chordify_set_key"]
chordify_get_preferences = tools["chordify_get_preferences"]
chordify_delete_preferences = tools["chordify_delete_preferences"]
chordify_suggest_chord = tools["chordify_suggest_chord"]
chordify_suggest_progression = tools["chordify_suggest_progression"]

logger.info("CHUK Chordify MCP Server initialized")
logger.info(f"  Data dir: {config.data_dir or '(in memory)'}")
logger.info(f"  Output dir: {config.output_dir}")
