"""
Suggestion tools - MCP tools for suggestion preferences and chord suggestions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_chordify.constants import SuccessMessages
from chuk_mcp_chordify.errors import ChordifyError
from chuk_mcp_chordify.models.result import err, ok
from chuk_mcp_chordify.settings import SuggestionPreferencesStore
from chuk_mcp_chordify.suggestion import SuggestionEngine

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_suggestion_tools(
    mcp: ChukMCPServer,
    preferences: SuggestionPreferencesStore,
    engine: SuggestionEngine,
) -> dict[str, Any]:
    """
    Register suggestion tools with the MCP server.

    Args:
        mcp: The MCP server instance
        preferences: The suggestion preferences store
        engine: The suggestion engine

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_initialize_preferences(progression_id: str) -> str:
        """
        Create suggestion preferences for a progression (Pop, Simple, key of C).

        Calling this again keeps the existing preferences unchanged.

        Args:
            progression_id: Progression id

        Returns:
            JSON string with the suggestion preferences
        """
        try:
            record = await preferences.initialize(progression_id)
            return ok(preferences=record.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to initialize preferences for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to initialize preferences")
            return err(e)

    tools["chordify_initialize_preferences"] = chordify_initialize_preferences

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_set_genre(progression_id: str, genre: str) -> str:
        """
        Set the genre suggestions are biased towards.

        Args:
            progression_id: Progression id
            genre: Pop, Rock, Jazz, Classical, Hip hop, R&B, Country or Electronic

        Returns:
            JSON string with the updated preferences
        """
        try:
            record = await preferences.set_genre(progression_id, genre)
            return ok(preferences=record.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to set genre for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to set genre")
            return err(e)

    tools["chordify_set_genre"] = chordify_set_genre

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_set_complexity(progression_id: str, complexity: str) -> str:
        """
        Set how adventurous suggestions may be.

        Args:
            progression_id: Progression id
            complexity: Simple, Intermediate or Advanced

        Returns:
            JSON string with the updated preferences
        """
        try:
            record = await preferences.set_complexity(progression_id, complexity)
            return ok(preferences=record.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to set complexity for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to set complexity")
            return err(e)

    tools["chordify_set_complexity"] = chordify_set_complexity

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_set_key(progression_id: str, key: str) -> str:
        """
        Set the key suggestions are made in.

        Args:
            progression_id: Progression id
            key: Key such as 'C', 'F#', 'Bb', 'Am' or 'D minor'

        Returns:
            JSON string with the updated preferences
        """
        try:
            record = await preferences.set_key(progression_id, key)
            return ok(preferences=record.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to set key for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to set key")
            return err(e)

    tools["chordify_set_key"] = chordify_set_key

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_get_preferences(progression_id: str) -> str:
        """
        Get the suggestion preferences of a progression.

        Args:
            progression_id: Progression id

        Returns:
            JSON string with the preferences
        """
        try:
            record = await preferences.get(progression_id)
            return ok(preferences=record.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to get preferences for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to get preferences")
            return err(e)

    tools["chordify_get_preferences"] = chordify_get_preferences

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_delete_preferences(progression_id: str) -> str:
        """
        Delete the suggestion preferences of a progression.

        Args:
            progression_id: Progression id

        Returns:
            JSON string with a confirmation message
        """
        try:
            await preferences.delete(progression_id)
            return ok(
                message=SuccessMessages.PREFERENCES_DELETED.format(progression_id=progression_id)
            )
        except ChordifyError as e:
            logger.warning(f"Failed to delete preferences for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to delete preferences")
            return err(e)

    tools["chordify_delete_preferences"] = chordify_delete_preferences

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_suggest_chord(
        progression_id: str,
        chords: list[str | None],
        position: int,
    ) -> str:
        """
        Suggest chords for one position, ranked best first.

        Uses the neighbouring chords and the progression's preferences.

        Args:
            progression_id: Progression whose preferences to use
            chords: Current chords in order; null for empty slots
            position: 0-based position to fill (must be < len(chords))

        Returns:
            JSON string with up to 24 suggested chord symbols

        Example:
            chordify_suggest_chord(progression_id="...", chords=["C", null, "G"], position=1)
        """
        try:
            record = await preferences.get(progression_id)
            suggested = engine.suggest_chord(record, chords, position)
            return ok(suggested_chords=suggested)
        except ChordifyError as e:
            logger.warning(f"Failed to suggest chord for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to suggest chord")
            return err(e)

    tools["chordify_suggest_chord"] = chordify_suggest_chord

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_suggest_progression(progression_id: str, length: int) -> str:
        """
        Generate a whole progression plus alternatives.

        Args:
            progression_id: Progression whose preferences to use
            length: Number of chords (1-32)

        Returns:
            JSON string with the best chord sequence and alternative sequences

        Example:
            chordify_suggest_progression(progression_id="...", length=4)
        """
        try:
            record = await preferences.get(progression_id)
            best, *alternatives = engine.suggest_progressions(record, length)
            return ok(chord_sequence=best, alternatives=alternatives)
        except ChordifyError as e:
            logger.warning(f"Failed to suggest progression for {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to suggest progression")
            return err(e)

    tools["chordify_suggest_progression"] = chordify_suggest_progression

    return tools
