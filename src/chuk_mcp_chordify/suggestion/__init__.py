"""
Suggestion engine - ranked chords and generated progressions.
"""

from chuk_mcp_chordify.suggestion.engine import Candidate, CandidateKind, SuggestionEngine

__all__ = [
    "Candidate",
    "CandidateKind",
    "SuggestionEngine",
]
