"""
Progression management - the ordered-slot store.

This module provides:
- ProgressionManager: lifecycle and slot edits, serialized per progression
- KeyedLocks: per-key asyncio locks shared with the settings stores
"""

from chuk_mcp_chordify.progression.locks import KeyedLocks
from chuk_mcp_chordify.progression.manager import ProgressionDependent, ProgressionManager

__all__ = [
    "KeyedLocks",
    "ProgressionDependent",
    "ProgressionManager",
]
