"""
Suggestion preferences store - genre, complexity and key per progression.
"""

from __future__ import annotations

from chuk_mcp_chordify.constants import (
    DEFAULT_COMPLEXITY,
    DEFAULT_GENRE,
    DEFAULT_KEY,
    ComplexityLevel,
    ErrorMessages,
    Genre,
)
from chuk_mcp_chordify.models.settings import (
    SuggestionPreferences,
    parse_complexity,
    parse_genre,
    parse_key,
)
from chuk_mcp_chordify.progression.manager import ProgressionManager
from chuk_mcp_chordify.settings.base import SettingsStore
from chuk_mcp_chordify.storage import YamlRecordStore


class SuggestionPreferencesStore(SettingsStore[SuggestionPreferences]):
    """Stores SuggestionPreferences keyed by progression id."""

    record_type = SuggestionPreferences
    not_found_message = ErrorMessages.PREFERENCES_NOT_FOUND
    label = "suggestion preferences"

    def __init__(
        self,
        progressions: ProgressionManager,
        storage: YamlRecordStore | None = None,
        default_genre: Genre = DEFAULT_GENRE,
        default_complexity: ComplexityLevel = DEFAULT_COMPLEXITY,
        default_key: str = DEFAULT_KEY,
    ):
        super().__init__(progressions, storage)
        self.default_genre = parse_genre(default_genre)
        self.default_complexity = parse_complexity(default_complexity)
        self.default_key = parse_key(default_key)

    def _default(self, progression_id: str) -> SuggestionPreferences:
        return SuggestionPreferences(
            progression_id=progression_id,
            genre=self.default_genre,
            complexity=self.default_complexity,
            key=self.default_key,
        )

    async def set_genre(self, progression_id: str, genre: str) -> SuggestionPreferences:
        """Set the preferred genre. Raises ValidationError or NotFoundError."""
        return await self._update(progression_id, genre=parse_genre(genre))

    async def set_complexity(self, progression_id: str, complexity: str) -> SuggestionPreferences:
        """Set the complexity level. Raises ValidationError or NotFoundError."""
        return await self._update(progression_id, complexity=parse_complexity(complexity))

    async def set_key(self, progression_id: str, key: str) -> SuggestionPreferences:
        """Set the key. Raises InvalidKeyError or NotFoundError."""
        return await self._update(progression_id, key=parse_key(key))
