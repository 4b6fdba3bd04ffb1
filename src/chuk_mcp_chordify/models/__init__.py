"""
Pydantic models for the progression service.

This module provides:
- Progression / Slot: the ordered-slot chord progression
- ProgressionSummary: id + name for listings
- PlaybackSettings / SuggestionPreferences: per-progression settings records
- Ok / Err: tagged tool results
"""

from chuk_mcp_chordify.models.progression import (
    Progression,
    ProgressionSummary,
    Slot,
    validate_name,
)
from chuk_mcp_chordify.models.result import Err, Ok, err, ok
from chuk_mcp_chordify.models.settings import (
    PlaybackSettings,
    SuggestionPreferences,
    parse_complexity,
    parse_genre,
    parse_instrument,
    parse_key,
    parse_seconds_per_chord,
)

__all__ = [
    "Err",
    "Ok",
    "PlaybackSettings",
    "Progression",
    "ProgressionSummary",
    "Slot",
    "SuggestionPreferences",
    "err",
    "ok",
    "parse_complexity",
    "parse_genre",
    "parse_instrument",
    "parse_key",
    "parse_seconds_per_chord",
    "validate_name",
]
