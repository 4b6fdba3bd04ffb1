"""
Tests for MCP tools.

Tests the MCP tool implementations for progressions, playback and
suggestions, including the JSON error results.
"""

import json
from pathlib import Path

import pytest

from chuk_mcp_chordify.progression import ProgressionManager
from chuk_mcp_chordify.settings import PlaybackSettingsStore, SuggestionPreferencesStore
from chuk_mcp_chordify.suggestion import SuggestionEngine
from chuk_mcp_chordify.tools import (
    register_playback_tools,
    register_progression_tools,
    register_suggestion_tools,
)


# Mock MCP server for testing tools
class MockMCPServer:
    """Mock MCP server that just stores registered tools."""

    def __init__(self, name: str):
        self.name = name
        self.tools: dict = {}

    def tool(self, func):
        """Decorator to register a tool."""
        self.tools[func.__name__] = func
        return func


@pytest.fixture
def mcp() -> MockMCPServer:
    return MockMCPServer("test")


@pytest.fixture
def tools(
    mcp: MockMCPServer,
    manager: ProgressionManager,
    playback: PlaybackSettingsStore,
    preferences: SuggestionPreferencesStore,
    temp_dir: Path,
) -> dict:
    registered: dict = {}
    registered.update(register_progression_tools(mcp, manager))
    registered.update(register_playback_tools(mcp, manager, playback, temp_dir))
    registered.update(register_suggestion_tools(mcp, preferences, SuggestionEngine()))
    return registered


async def call(tools: dict, tool_name: str, **kwargs) -> dict:
    return json.loads(await tools[tool_name](**kwargs))


async def create(tools: dict, name: str = "Blues", slots: int = 0) -> str:
    data = await call(tools, "chordify_create_progression", name=name)
    progression_id = data["progression"]["id"]
    for _ in range(slots):
        await call(tools, "chordify_add_slot", progression_id=progression_id)
    return progression_id


class TestRegistration:
    def test_all_tools_registered(self, mcp: MockMCPServer, tools: dict) -> None:
        assert set(mcp.tools) == set(tools)
        assert len(tools) == 26
        assert all(name.startswith("chordify_") for name in tools)


class TestProgressionTools:
    @pytest.mark.asyncio
    async def test_create(self, tools: dict) -> None:
        data = await call(tools, "chordify_create_progression", name="  Blues ")
        assert data["status"] == "success"
        assert data["progression"]["name"] == "Blues"
        assert data["progression"]["slots"] == []

    @pytest.mark.asyncio
    async def test_create_invalid_name(self, tools: dict) -> None:
        data = await call(tools, "chordify_create_progression", name="")
        assert data["status"] == "error"
        assert data["error_type"] == "validation_error"

    @pytest.mark.asyncio
    async def test_add_slot_returns_position(self, tools: dict) -> None:
        progression_id = await create(tools, slots=2)
        data = await call(tools, "chordify_add_slot", progression_id=progression_id)
        assert data["position"] == 2
        assert len(data["progression"]["slots"]) == 3

    @pytest.mark.asyncio
    async def test_blues_scenario(self, tools: dict) -> None:
        progression_id = await create(tools, slots=4)
        for position, chord in enumerate(["C7", "F7", "G7", "C7"]):
            await call(
                tools,
                "chordify_set_chord",
                progression_id=progression_id,
                position=position,
                chord=chord,
            )

        data = await call(
            tools,
            "chordify_reorder_slots",
            progression_id=progression_id,
            old_position=3,
            new_position=0,
        )
        assert [s["chord"] for s in data["progression"]["slots"]] == ["C7", "C7", "F7", "G7"]

        data = await call(tools, "chordify_delete_slot", progression_id=progression_id, position=1)
        assert [s["chord"] for s in data["progression"]["slots"]] == ["C7", "F7", "G7"]

    @pytest.mark.asyncio
    async def test_altered_chords_accepted(self, tools: dict) -> None:
        progression_id = await create(tools, slots=2)
        await call(
            tools, "chordify_set_chord", progression_id=progression_id, position=0, chord="G7b9"
        )
        data = await call(
            tools, "chordify_set_chord", progression_id=progression_id, position=1, chord="Cm(add9)"
        )
        assert data["status"] == "success"
        assert [s["chord"] for s in data["progression"]["slots"]] == ["G7b9", "Cm(add9)"]

    @pytest.mark.asyncio
    async def test_invalid_chord(self, tools: dict) -> None:
        progression_id = await create(tools, slots=1)
        data = await call(
            tools, "chordify_set_chord", progression_id=progression_id, position=0, chord="Xz9"
        )
        assert data["status"] == "error"
        assert data["error_type"] == "invalid_chord"

        data = await call(tools, "chordify_get_progression", progression_id=progression_id)
        assert data["progression"]["slots"] == [{"chord": None}]

    @pytest.mark.asyncio
    async def test_position_out_of_range(self, tools: dict) -> None:
        progression_id = await create(tools, slots=1)
        data = await call(
            tools, "chordify_delete_chord", progression_id=progression_id, position=1
        )
        assert data["error_type"] == "position_out_of_range"

    @pytest.mark.asyncio
    async def test_not_found(self, tools: dict) -> None:
        data = await call(tools, "chordify_get_progression", progression_id="missing")
        assert data == {
            "status": "error",
            "error": "Progression 'missing' not found.",
            "error_type": "not_found",
        }

    @pytest.mark.asyncio
    async def test_rename_list_delete(self, tools: dict) -> None:
        progression_id = await create(tools)
        await call(tools, "chordify_rename_progression", progression_id=progression_id, name="New")

        data = await call(tools, "chordify_list_progressions")
        assert data["progression_identifiers"] == [{"id": progression_id, "name": "New"}]

        data = await call(tools, "chordify_delete_progression", progression_id=progression_id)
        assert data["status"] == "success"
        assert progression_id in data["message"]

        data = await call(tools, "chordify_list_progressions")
        assert data["progression_identifiers"] == []

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self, tools: dict, manager) -> None:
        async def broken(progression_id: str):
            raise RuntimeError("disk on fire")

        manager.get = broken
        data = await call(tools, "chordify_get_progression", progression_id="x")
        assert data["status"] == "error"
        assert data["error_type"] == "internal"


class TestPlaybackTools:
    @pytest.mark.asyncio
    async def test_settings_lifecycle(self, tools: dict) -> None:
        progression_id = await create(tools)

        data = await call(
            tools, "chordify_initialize_playback_settings", progression_id=progression_id
        )
        assert data["settings"] == {
            "progression_id": progression_id,
            "instrument": "Piano",
            "seconds_per_chord": 2.0,
        }

        await call(
            tools, "chordify_set_instrument", progression_id=progression_id, instrument="Guitar"
        )
        await call(
            tools,
            "chordify_set_seconds_per_chord",
            progression_id=progression_id,
            seconds_per_chord=3,
        )
        data = await call(tools, "chordify_get_playback_settings", progression_id=progression_id)
        assert data["settings"]["instrument"] == "Guitar"
        assert data["settings"]["seconds_per_chord"] == 3.0

        data = await call(
            tools, "chordify_delete_playback_settings", progression_id=progression_id
        )
        assert data["status"] == "success"
        data = await call(tools, "chordify_get_playback_settings", progression_id=progression_id)
        assert data["error_type"] == "not_found"

    @pytest.mark.asyncio
    async def test_invalid_seconds(self, tools: dict) -> None:
        progression_id = await create(tools)
        await call(tools, "chordify_initialize_playback_settings", progression_id=progression_id)
        data = await call(
            tools,
            "chordify_set_seconds_per_chord",
            progression_id=progression_id,
            seconds_per_chord=11,
        )
        assert data["error_type"] == "validation_error"

    @pytest.mark.asyncio
    async def test_play_chord(self, tools: dict) -> None:
        progression_id = await create(tools)
        await call(tools, "chordify_initialize_playback_settings", progression_id=progression_id)

        data = await call(tools, "chordify_play_chord", progression_id=progression_id, chord="C")
        assert data["status"] == "success"
        assert data["notes"] == ["C3", "C4", "E4", "G4"]
        assert data["midi_notes"] == [48, 60, 64, 67]
        assert data["instrument"] == "Piano"
        assert data["duration"] == 2.0

    @pytest.mark.asyncio
    async def test_play_without_settings(self, tools: dict) -> None:
        progression_id = await create(tools)
        data = await call(tools, "chordify_play_chord", progression_id=progression_id, chord="C")
        assert data["error_type"] == "not_found"

    @pytest.mark.asyncio
    async def test_play_progression(self, tools: dict) -> None:
        progression_id = await create(tools)
        await call(tools, "chordify_initialize_playback_settings", progression_id=progression_id)

        data = await call(
            tools,
            "chordify_play_progression",
            progression_id=progression_id,
            chord_sequence=["C", None, "G"],
        )
        assert data["total_duration"] == 6.0
        assert [item["chord"] for item in data["sequence"]] == ["C", None, "G"]
        assert data["sequence"][1]["notes"] == []

    @pytest.mark.asyncio
    async def test_export_midi(self, tools: dict, temp_dir: Path) -> None:
        progression_id = await create(tools, slots=2)
        await call(
            tools, "chordify_set_chord", progression_id=progression_id, position=0, chord="Am"
        )
        await call(tools, "chordify_initialize_playback_settings", progression_id=progression_id)

        data = await call(
            tools,
            "chordify_export_midi",
            progression_id=progression_id,
            filename="../escape.mid",
        )
        assert data["status"] == "success"
        assert Path(data["path"]) == temp_dir / "escape.mid"
        assert Path(data["path"]).exists()

    @pytest.mark.asyncio
    async def test_export_default_filename(self, tools: dict, temp_dir: Path) -> None:
        progression_id = await create(tools, slots=1)
        await call(tools, "chordify_initialize_playback_settings", progression_id=progression_id)
        data = await call(tools, "chordify_export_midi", progression_id=progression_id)
        assert Path(data["path"]) == temp_dir / f"{progression_id}.mid"


class TestSuggestionTools:
    @pytest.mark.asyncio
    async def test_preferences_lifecycle(self, tools: dict) -> None:
        progression_id = await create(tools)

        data = await call(tools, "chordify_initialize_preferences", progression_id=progression_id)
        assert data["preferences"]["genre"] == "Pop"
        assert data["preferences"]["complexity"] == "Simple"
        assert data["preferences"]["key"] == "C"

        await call(tools, "chordify_set_genre", progression_id=progression_id, genre="Jazz")
        await call(
            tools,
            "chordify_set_complexity",
            progression_id=progression_id,
            complexity="Intermediate",
        )
        await call(tools, "chordify_set_key", progression_id=progression_id, key="Bb")

        data = await call(tools, "chordify_get_preferences", progression_id=progression_id)
        assert data["preferences"]["genre"] == "Jazz"
        assert data["preferences"]["complexity"] == "Intermediate"
        assert data["preferences"]["key"] == "Bb"

        data = await call(tools, "chordify_delete_preferences", progression_id=progression_id)
        assert data["status"] == "success"

    @pytest.mark.asyncio
    async def test_invalid_key(self, tools: dict) -> None:
        progression_id = await create(tools)
        await call(tools, "chordify_initialize_preferences", progression_id=progression_id)
        data = await call(tools, "chordify_set_key", progression_id=progression_id, key="Q")
        assert data["error_type"] == "invalid_key"

    @pytest.mark.asyncio
    async def test_suggest_chord(self, tools: dict) -> None:
        progression_id = await create(tools)
        await call(tools, "chordify_initialize_preferences", progression_id=progression_id)

        data = await call(
            tools,
            "chordify_suggest_chord",
            progression_id=progression_id,
            chords=["G", None],
            position=1,
        )
        assert data["status"] == "success"
        assert data["suggested_chords"][0] == "C"

    @pytest.mark.asyncio
    async def test_suggest_chord_bad_position(self, tools: dict) -> None:
        progression_id = await create(tools)
        await call(tools, "chordify_initialize_preferences", progression_id=progression_id)
        data = await call(
            tools,
            "chordify_suggest_chord",
            progression_id=progression_id,
            chords=["C"],
            position=1,
        )
        assert data["error_type"] == "position_out_of_range"

    @pytest.mark.asyncio
    async def test_suggest_progression(self, tools: dict) -> None:
        progression_id = await create(tools)
        await call(tools, "chordify_initialize_preferences", progression_id=progression_id)

        data = await call(
            tools, "chordify_suggest_progression", progression_id=progression_id, length=4
        )
        assert len(data["chord_sequence"]) == 4
        assert len(data["alternatives"]) == 2

    @pytest.mark.asyncio
    async def test_suggest_without_preferences(self, tools: dict) -> None:
        progression_id = await create(tools)
        data = await call(
            tools, "chordify_suggest_progression", progression_id=progression_id, length=4
        )
        assert data["error_type"] == "not_found"

    @pytest.mark.asyncio
    async def test_cascade_through_tools(self, tools: dict) -> None:
        progression_id = await create(tools)
        await call(tools, "chordify_initialize_preferences", progression_id=progression_id)
        await call(tools, "chordify_initialize_playback_settings", progression_id=progression_id)
        await call(tools, "chordify_delete_progression", progression_id=progression_id)

        data = await call(tools, "chordify_get_preferences", progression_id=progression_id)
        assert data["error_type"] == "not_found"
        data = await call(tools, "chordify_get_playback_settings", progression_id=progression_id)
        assert data["error_type"] == "not_found"
