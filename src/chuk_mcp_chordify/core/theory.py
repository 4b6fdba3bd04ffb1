"""
Chord and key validation predicates.

These are the gate every store passes a chord or key through before
persisting it. Both are total: any input, including non-strings, yields a
bool and never raises.
"""

from __future__ import annotations

from .chord import Chord
from .scale import Key


def is_valid_chord(symbol: object) -> bool:
    """Return True if `symbol` is a chord symbol the parser accepts."""
    if not isinstance(symbol, str) or not symbol.strip():
        return False
    try:
        Chord.parse(symbol)
    except ValueError:
        return False
    return True


def is_valid_key(symbol: object) -> bool:
    """Return True if `symbol` names a major or minor key ('C', 'Am', 'D_minor')."""
    if not isinstance(symbol, str) or not symbol.strip():
        return False
    try:
        Key.parse(symbol)
    except ValueError:
        return False
    return True
