"""
Playback settings store - instrument and chord duration per progression.
"""

from __future__ import annotations

from chuk_mcp_chordify.constants import (
    DEFAULT_INSTRUMENT,
    DEFAULT_SECONDS_PER_CHORD,
    ErrorMessages,
    Instrument,
)
from chuk_mcp_chordify.models.settings import (
    PlaybackSettings,
    parse_instrument,
    parse_seconds_per_chord,
)
from chuk_mcp_chordify.progression.manager import ProgressionManager
from chuk_mcp_chordify.settings.base import SettingsStore
from chuk_mcp_chordify.storage import YamlRecordStore


class PlaybackSettingsStore(SettingsStore[PlaybackSettings]):
    """Stores PlaybackSettings keyed by progression id."""

    record_type = PlaybackSettings
    not_found_message = ErrorMessages.PLAYBACK_SETTINGS_NOT_FOUND
    label = "playback settings"

    def __init__(
        self,
        progressions: ProgressionManager,
        storage: YamlRecordStore | None = None,
        default_instrument: Instrument = DEFAULT_INSTRUMENT,
        default_seconds_per_chord: float = DEFAULT_SECONDS_PER_CHORD,
    ):
        super().__init__(progressions, storage)
        self.default_instrument = parse_instrument(default_instrument)
        self.default_seconds_per_chord = parse_seconds_per_chord(default_seconds_per_chord)

    def _default(self, progression_id: str) -> PlaybackSettings:
        return PlaybackSettings(
            progression_id=progression_id,
            instrument=self.default_instrument,
            seconds_per_chord=self.default_seconds_per_chord,
        )

    async def set_instrument(self, progression_id: str, instrument: str) -> PlaybackSettings:
        """
        Set the playback instrument.

        Raises:
            ValidationError: If the instrument is not Piano, Guitar or Synthesizer
            NotFoundError: If the settings were never initialized
        """
        return await self._update(progression_id, instrument=parse_instrument(instrument))

    async def set_seconds_per_chord(
        self, progression_id: str, seconds_per_chord: float
    ) -> PlaybackSettings:
        """
        Set how long each chord sounds.

        Raises:
            ValidationError: If the value is outside [1, 10]
            NotFoundError: If the settings were never initialized
        """
        seconds = parse_seconds_per_chord(seconds_per_chord)
        return await self._update(progression_id, seconds_per_chord=seconds)
