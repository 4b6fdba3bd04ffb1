"""
MCP tool implementations.

Tools are organized by domain:
- progression - Progression lifecycle and slot edits
- playback - Playback settings, rendering and MIDI export
- suggestion - Suggestion preferences and chord suggestions
"""

from chuk_mcp_chordify.tools.playback import register_playback_tools
from chuk_mcp_chordify.tools.progression import register_progression_tools
from chuk_mcp_chordify.tools.suggestion import register_suggestion_tools

__all__ = [
    "register_playback_tools",
    "register_progression_tools",
    "register_suggestion_tools",
]
