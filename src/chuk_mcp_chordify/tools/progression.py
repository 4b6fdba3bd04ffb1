"""
Progression tools - MCP tools for progression lifecycle and slot edits.

Every slot tool answers with the full progression after the edit. Positions
are 0-based and always checked against the length at the time of the edit,
so a client should re-read positions from the returned progression rather
than reuse ones it cached earlier.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_chordify.constants import SuccessMessages
from chuk_mcp_chordify.errors import ChordifyError
from chuk_mcp_chordify.models.result import err, ok
from chuk_mcp_chordify.progression import ProgressionManager

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_progression_tools(
    mcp: ChukMCPServer,
    manager: ProgressionManager,
) -> dict[str, Any]:
    """
    Register progression tools with the MCP server.

    Args:
        mcp: The MCP server instance
        manager: The progression manager

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_create_progression(name: str) -> str:
        """
        Create a new, empty chord progression.

        Args:
            name: Display name (1-100 characters, surrounding whitespace is trimmed)

        Returns:
            JSON string with the new progression, including its id

        Example:
            chordify_create_progression(name="Blues in A")
        """
        try:
            progression = await manager.create(name)
            return ok(progression=progression.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to create progression: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to create progression")
            return err(e)

    tools["chordify_create_progression"] = chordify_create_progression

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_add_slot(progression_id: str) -> str:
        """
        Append an empty slot to a progression.

        Args:
            progression_id: Progression id

        Returns:
            JSON string with the progression and the new slot's position

        Example:
            chordify_add_slot(progression_id="...")
        """
        try:
            progression = await manager.add_slot(progression_id)
            return ok(progression=progression.to_dict(), position=progression.slot_count - 1)
        except ChordifyError as e:
            logger.warning(f"Failed to add slot to {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to add slot")
            return err(e)

    tools["chordify_add_slot"] = chordify_add_slot

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_set_chord(progression_id: str, position: int, chord: str) -> str:
        """
        Put a chord into an existing slot.

        Args:
            progression_id: Progression id
            position: 0-based slot position (must already exist)
            chord: Chord symbol, e.g. 'C', 'F#m7', 'Bbmaj7', 'G7/B'

        Returns:
            JSON string with the updated progression

        Example:
            chordify_set_chord(progression_id="...", position=0, chord="A7")
        """
        try:
            progression = await manager.set_chord(progression_id, position, chord)
            return ok(progression=progression.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to set chord in {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to set chord")
            return err(e)

    tools["chordify_set_chord"] = chordify_set_chord

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_delete_chord(progression_id: str, position: int) -> str:
        """
        Clear the chord in a slot. The slot itself stays.

        Args:
            progression_id: Progression id
            position: 0-based slot position

        Returns:
            JSON string with the updated progression
        """
        try:
            progression = await manager.delete_chord(progression_id, position)
            return ok(progression=progression.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to delete chord in {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to delete chord")
            return err(e)

    tools["chordify_delete_chord"] = chordify_delete_chord

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_delete_slot(progression_id: str, position: int) -> str:
        """
        Remove a slot. Later slots move down one position.

        Args:
            progression_id: Progression id
            position: 0-based slot position

        Returns:
            JSON string with the updated progression
        """
        try:
            progression = await manager.delete_slot(progression_id, position)
            return ok(progression=progression.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to delete slot in {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to delete slot")
            return err(e)

    tools["chordify_delete_slot"] = chordify_delete_slot

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_reorder_slots(
        progression_id: str,
        old_position: int,
        new_position: int,
    ) -> str:
        """
        Move a slot to a new position.

        The slot is taken out first and then inserted at `new_position` of the
        remaining slots, so both positions must be below the current length.

        Args:
            progression_id: Progression id
            old_position: Current 0-based position of the slot
            new_position: 0-based position to move it to

        Returns:
            JSON string with the updated progression

        Example:
            chordify_reorder_slots(progression_id="...", old_position=3, new_position=0)
        """
        try:
            progression = await manager.reorder_slots(progression_id, old_position, new_position)
            return ok(progression=progression.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to reorder slots in {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to reorder slots")
            return err(e)

    tools["chordify_reorder_slots"] = chordify_reorder_slots

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_rename_progression(progression_id: str, name: str) -> str:
        """
        Rename a progression. The id does not change.

        Args:
            progression_id: Progression id
            name: New display name (1-100 characters)

        Returns:
            JSON string with the updated progression
        """
        try:
            progression = await manager.rename(progression_id, name)
            return ok(progression=progression.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to rename {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to rename progression")
            return err(e)

    tools["chordify_rename_progression"] = chordify_rename_progression

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_delete_progression(progression_id: str) -> str:
        """
        Delete a progression together with its playback settings and
        suggestion preferences.

        Args:
            progression_id: Progression id

        Returns:
            JSON string with a confirmation message
        """
        try:
            await manager.delete(progression_id)
            return ok(
                message=SuccessMessages.PROGRESSION_DELETED.format(progression_id=progression_id)
            )
        except ChordifyError as e:
            logger.warning(f"Failed to delete {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to delete progression")
            return err(e)

    tools["chordify_delete_progression"] = chordify_delete_progression

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_get_progression(progression_id: str) -> str:
        """
        Get a progression with all of its slots.

        Args:
            progression_id: Progression id

        Returns:
            JSON string with the progression
        """
        try:
            progression = await manager.get(progression_id)
            return ok(progression=progression.to_dict())
        except ChordifyError as e:
            logger.warning(f"Failed to get {progression_id}: {e}")
            return err(e)
        except Exception as e:
            logger.exception("Failed to get progression")
            return err(e)

    tools["chordify_get_progression"] = chordify_get_progression

    @mcp.tool  # type: ignore[arg-type]
    async def chordify_list_progressions() -> str:
        """
        List every progression by id and name, oldest first.

        Returns:
            JSON string with progression identifiers
        """
        try:
            summaries = await manager.list_progressions()
            return ok(progression_identifiers=[s.model_dump() for s in summaries])
        except Exception as e:
            logger.exception("Failed to list progressions")
            return err(e)

    tools["chordify_list_progressions"] = chordify_list_progressions

    return tools
