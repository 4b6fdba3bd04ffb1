"""
Settings stores - per-progression side tables with cascade delete.

- PlaybackSettingsStore: instrument and seconds per chord
- SuggestionPreferencesStore: genre, complexity and key
"""

from chuk_mcp_chordify.settings.base import SettingsStore
from chuk_mcp_chordify.settings.playback import PlaybackSettingsStore
from chuk_mcp_chordify.settings.suggestion import SuggestionPreferencesStore

__all__ = [
    "PlaybackSettingsStore",
    "SettingsStore",
    "SuggestionPreferencesStore",
]
