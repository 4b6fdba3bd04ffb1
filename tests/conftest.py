"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from chuk_mcp_chordify.progression import ProgressionManager
from chuk_mcp_chordify.settings import PlaybackSettingsStore, SuggestionPreferencesStore


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def manager() -> ProgressionManager:
    """In-memory progression manager."""
    return ProgressionManager()


@pytest.fixture
def playback(manager: ProgressionManager) -> PlaybackSettingsStore:
    """In-memory playback settings store wired to the manager."""
    return PlaybackSettingsStore(manager)


@pytest.fixture
def preferences(manager: ProgressionManager) -> SuggestionPreferencesStore:
    """In-memory suggestion preferences store wired to the manager."""
    return SuggestionPreferencesStore(manager)
