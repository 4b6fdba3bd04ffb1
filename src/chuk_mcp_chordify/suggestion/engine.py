"""
Suggestion engine - ranked chord candidates and generated progressions.

The engine is stateless: the same preferences, chords and position always
give the same answer. It never touches a store; callers look preferences up
first and pass them in.

Ranking combines:
- how well the candidate follows the previous chord (functional transitions)
- how well it leads into the next chord, if one is set
- dominant resolution (X7 -> chord a fifth below)
- genre bias towards certain degrees and chord colours
- complexity, which decides the candidate pool and favours richer chords
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from chuk_mcp_chordify.constants import (
    MAX_SUGGESTED_PROGRESSION_LENGTH,
    NUM_PROGRESSION_SUGGESTIONS,
    NUM_SUGGESTIONS,
    ComplexityLevel,
    ErrorMessages,
    Genre,
)
from chuk_mcp_chordify.core.chord import Chord, ChordQuality, get_diatonic_chords
from chuk_mcp_chordify.core.scale import Key, ScaleDegree
from chuk_mcp_chordify.errors import InvalidChordError, PositionOutOfRangeError, ValidationError
from chuk_mcp_chordify.models.settings import SuggestionPreferences

logger = logging.getLogger(__name__)


class CandidateKind(str, Enum):
    """Where a candidate chord comes from."""

    TRIAD = "triad"
    SEVENTH = "seventh"
    SUSPENDED = "suspended"
    EXTENDED = "extended"
    SECONDARY = "secondary"
    BORROWED = "borrowed"


@dataclass(frozen=True)
class Candidate:
    """A chord the engine may suggest, with its function in the key."""

    chord: Chord
    kind: CandidateKind
    degree: int | None  # 1-7 degree of the root in the key, None if chromatic

    @property
    def symbol(self) -> str:
        return self.chord.symbol()


# Transition strength from one degree to the next (common-practice tendencies)
TRANSITIONS: dict[int, dict[int, float]] = {
    1: {1: 0.1, 2: 0.6, 3: 0.4, 4: 0.9, 5: 0.9, 6: 0.7, 7: 0.2},
    2: {1: 0.3, 2: 0.05, 3: 0.2, 4: 0.4, 5: 1.0, 6: 0.2, 7: 0.5},
    3: {1: 0.2, 2: 0.4, 3: 0.05, 4: 0.7, 5: 0.3, 6: 0.9, 7: 0.1},
    4: {1: 0.8, 2: 0.6, 3: 0.2, 4: 0.05, 5: 0.9, 6: 0.4, 7: 0.4},
    5: {1: 1.0, 2: 0.2, 3: 0.2, 4: 0.4, 5: 0.05, 6: 0.7, 7: 0.1},
    6: {1: 0.3, 2: 0.8, 3: 0.4, 4: 0.9, 5: 0.6, 6: 0.05, 7: 0.2},
    7: {1: 1.0, 2: 0.1, 3: 0.6, 4: 0.1, 5: 0.2, 6: 0.3, 7: 0.05},
}

# Degrees a progression likes to open on
OPENING: dict[int, float] = {1: 1.0, 6: 0.35, 4: 0.3, 5: 0.15, 2: 0.1}

GENRE_DEGREE_BIAS: dict[Genre, dict[int, float]] = {
    Genre.POP: {1: 0.3, 4: 0.3, 5: 0.3, 6: 0.3},
    Genre.ROCK: {1: 0.3, 4: 0.3, 5: 0.25, 7: 0.2},
    Genre.JAZZ: {2: 0.35, 5: 0.35, 1: 0.2, 6: 0.15},
    Genre.CLASSICAL: {1: 0.3, 5: 0.3, 4: 0.2, 2: 0.15, 7: 0.1},
    Genre.HIP_HOP: {6: 0.3, 4: 0.2, 1: 0.2, 3: 0.15},
    Genre.RNB: {2: 0.3, 4: 0.25, 6: 0.2, 3: 0.15},
    Genre.COUNTRY: {1: 0.35, 4: 0.3, 5: 0.3, 2: 0.1},
    Genre.ELECTRONIC: {6: 0.3, 4: 0.3, 1: 0.2, 5: 0.2},
}

GENRE_KIND_BIAS: dict[Genre, dict[CandidateKind, float]] = {
    Genre.POP: {CandidateKind.TRIAD: 0.1, CandidateKind.SUSPENDED: 0.05},
    Genre.ROCK: {CandidateKind.TRIAD: 0.1, CandidateKind.BORROWED: 0.15},
    Genre.JAZZ: {CandidateKind.SEVENTH: 0.2, CandidateKind.EXTENDED: 0.2},
    Genre.CLASSICAL: {CandidateKind.TRIAD: 0.15, CandidateKind.SECONDARY: 0.1},
    Genre.HIP_HOP: {CandidateKind.SEVENTH: 0.1, CandidateKind.BORROWED: 0.05},
    Genre.RNB: {CandidateKind.SEVENTH: 0.15, CandidateKind.EXTENDED: 0.2},
    Genre.COUNTRY: {CandidateKind.TRIAD: 0.15, CandidateKind.SECONDARY: 0.05},
    Genre.ELECTRONIC: {CandidateKind.SUSPENDED: 0.15, CandidateKind.EXTENDED: 0.05},
}

COMPLEXITY_KIND_WEIGHT: dict[ComplexityLevel, dict[CandidateKind, float]] = {
    ComplexityLevel.SIMPLE: {CandidateKind.TRIAD: 0.3},
    ComplexityLevel.INTERMEDIATE: {
        CandidateKind.TRIAD: 0.2,
        CandidateKind.SEVENTH: 0.25,
        CandidateKind.SUSPENDED: 0.1,
    },
    ComplexityLevel.ADVANCED: {
        CandidateKind.TRIAD: 0.05,
        CandidateKind.SEVENTH: 0.2,
        CandidateKind.SUSPENDED: 0.1,
        CandidateKind.EXTENDED: 0.25,
        CandidateKind.SECONDARY: 0.15,
        CandidateKind.BORROWED: 0.15,
    },
}

PREVIOUS_WEIGHT = 1.0
NEXT_WEIGHT = 0.6
RESOLUTION_BONUS = 0.6
REPEAT_PENALTY = 0.8
REUSE_PENALTY = 0.25

_DOMINANT_QUALITIES = frozenset(
    {
        ChordQuality.DOMINANT_7,
        ChordQuality.DOMINANT_9,
        ChordQuality.DOMINANT_11,
        ChordQuality.DOMINANT_13,
        ChordQuality.DOMINANT_7_SUS4,
        ChordQuality.DOMINANT_9_SUS4,
        ChordQuality.DOMINANT_7_FLAT_5,
        ChordQuality.DOMINANT_7_SHARP_5,
        ChordQuality.DOMINANT_7_FLAT_9,
        ChordQuality.DOMINANT_7_SHARP_9,
        ChordQuality.DOMINANT_7_SHARP_11,
        ChordQuality.DOMINANT_7_FLAT_13,
    }
)

_EXTENSIONS: dict[ChordQuality, ChordQuality] = {
    ChordQuality.MAJOR_7: ChordQuality.MAJOR_9,
    ChordQuality.MINOR_7: ChordQuality.MINOR_9,
    ChordQuality.DOMINANT_7: ChordQuality.DOMINANT_9,
}

_KIND_ORDER = list(CandidateKind)


def _resolves_to(source: Chord, target: Chord) -> bool:
    """True if `source` is a dominant-type chord a fifth above `target`."""
    return source.quality in _DOMINANT_QUALITIES and source.root.transpose(5) == target.root


class SuggestionEngine:
    """Deterministic chord and progression suggestions biased by preferences."""

    def __init__(self, max_suggestions: int = NUM_SUGGESTIONS):
        self.max_suggestions = max_suggestions

    # Public API

    def suggest_chord(
        self,
        preferences: SuggestionPreferences,
        chords: list[str | None],
        position: int,
    ) -> list[str]:
        """
        Rank candidate chords for one position of a progression.

        Args:
            preferences: Genre, complexity and key to bias towards
            chords: Current chords in slot order, None for empty slots
            position: Slot being filled, 0 <= position < len(chords)

        Returns:
            Up to `max_suggestions` distinct chord symbols, best first

        Raises:
            InvalidChordError: If a non-empty chord fails validation
            PositionOutOfRangeError: If position is outside the chord list
        """
        parsed = self._parse_chords(chords)
        if isinstance(position, bool) or not isinstance(position, int):
            raise PositionOutOfRangeError(position, len(parsed))
        if not 0 <= position < len(parsed):
            raise PositionOutOfRangeError(position, len(parsed))

        previous = next((c for c in reversed(parsed[:position]) if c is not None), None)
        following = next((c for c in parsed[position + 1 :] if c is not None), None)

        key = Key.parse(preferences.key)
        ranked = self._rank(
            self.candidate_pool(key, preferences.complexity),
            key,
            preferences,
            previous,
            following,
            history=[],
        )
        return [candidate.symbol for candidate in ranked[: self.max_suggestions]]

    def suggest_progressions(
        self,
        preferences: SuggestionPreferences,
        length: int,
        count: int = NUM_PROGRESSION_SUGGESTIONS,
    ) -> list[list[str]]:
        """
        Generate whole progressions.

        Each progression is built greedily from the ranking, treating the last
        chord as leading back into the first so the progression loops. The
        variants differ in the chord chosen at the first free decision.

        Args:
            preferences: Genre, complexity and key to bias towards
            length: Number of chords per progression (1-32)
            count: Number of progressions

        Returns:
            `count` chord sequences, best first

        Raises:
            ValidationError: If length is out of range
        """
        if (
            isinstance(length, bool)
            or not isinstance(length, int)
            or not 1 <= length <= MAX_SUGGESTED_PROGRESSION_LENGTH
        ):
            raise ValidationError(
                ErrorMessages.INVALID_LENGTH.format(
                    length=length, maximum=MAX_SUGGESTED_PROGRESSION_LENGTH
                )
            )

        key = Key.parse(preferences.key)
        pool = self.candidate_pool(key, preferences.complexity)
        branch_at = min(1, length - 1)

        progressions = []
        for variant in range(count):
            sequence: list[Candidate] = []
            for index in range(length):
                previous = sequence[-1].chord if sequence else None
                closing = sequence[0].chord if index == length - 1 and index > 0 else None
                ranked = self._rank(pool, key, preferences, previous, closing, history=sequence)
                choice = min(variant, len(ranked) - 1) if index == branch_at else 0
                sequence.append(ranked[choice])
            progressions.append([candidate.symbol for candidate in sequence])

        logger.debug(f"Generated {count} progression(s) of {length} in {key}")
        return progressions

    def candidate_pool(self, key: Key, complexity: ComplexityLevel) -> list[Candidate]:
        """
        Build the candidate chords allowed at a complexity level.

        Simple: diatonic triads. Intermediate adds diatonic sevenths and
        suspensions. Advanced adds ninths, sixths, secondary dominants and
        chords borrowed from the parallel key.
        """
        triads = get_diatonic_chords(key)
        pool = [
            Candidate(chord, CandidateKind.TRIAD, numeral.degree.degree)
            for numeral, chord in triads
        ]
        if complexity == ComplexityLevel.SIMPLE:
            return pool

        sevenths = get_diatonic_chords(key, sevenths=True)
        pool += [
            Candidate(chord, CandidateKind.SEVENTH, numeral.degree.degree)
            for numeral, chord in sevenths
        ]
        pool += self._suspensions(key)
        if complexity == ComplexityLevel.INTERMEDIATE:
            return pool

        for numeral, chord in sevenths:
            extended = _EXTENSIONS.get(chord.quality)
            if extended is not None and numeral.degree.degree != 3:
                pool.append(
                    Candidate(
                        Chord(chord.root, extended, flats=key.prefers_flats),
                        CandidateKind.EXTENDED,
                        numeral.degree.degree,
                    )
                )
        tonic = triads[0][1]
        sixth = ChordQuality.MINOR_6 if key.is_minor else ChordQuality.MAJOR_6
        pool.append(
            Candidate(Chord(tonic.root, sixth, flats=key.prefers_flats), CandidateKind.EXTENDED, 1)
        )
        for degree in (1, 4):
            chord = triads[degree - 1][1]
            if chord.quality == ChordQuality.MAJOR:
                pool.append(
                    Candidate(
                        Chord(chord.root, ChordQuality.ADD_9, flats=key.prefers_flats),
                        CandidateKind.EXTENDED,
                        degree,
                    )
                )

        pool += self._secondary_dominants(key, triads)
        pool += self._borrowed(key)
        return pool

    # Ranking

    def _rank(
        self,
        pool: list[Candidate],
        key: Key,
        preferences: SuggestionPreferences,
        previous: Chord | None,
        following: Chord | None,
        history: list[Candidate],
    ) -> list[Candidate]:
        best: dict[str, tuple[float, Candidate]] = {}
        for candidate in pool:
            score = self._score(candidate, key, preferences, previous, following, history)
            current = best.get(candidate.symbol)
            if current is None or score > current[0]:
                best[candidate.symbol] = (score, candidate)

        ordered = sorted(
            best.values(),
            key=lambda item: (
                -round(item[0], 6),
                item[1].degree or 8,
                _KIND_ORDER.index(item[1].kind),
                item[1].symbol,
            ),
        )
        return [candidate for _, candidate in ordered]

    def _score(
        self,
        candidate: Candidate,
        key: Key,
        preferences: SuggestionPreferences,
        previous: Chord | None,
        following: Chord | None,
        history: list[Candidate],
    ) -> float:
        score = 0.0
        degree = candidate.degree

        if previous is None:
            score += OPENING.get(degree, 0.0) if degree is not None else 0.0
        else:
            previous_degree = self._degree_of(previous, key)
            if previous_degree is not None and degree is not None:
                score += PREVIOUS_WEIGHT * TRANSITIONS[previous_degree][degree]
            if _resolves_to(previous, candidate.chord):
                score += RESOLUTION_BONUS
            if previous == candidate.chord:
                score -= REPEAT_PENALTY

        if following is not None:
            following_degree = self._degree_of(following, key)
            # Secondary dominants pull towards their target, scored by resolution alone
            if (
                following_degree is not None
                and degree is not None
                and candidate.kind != CandidateKind.SECONDARY
            ):
                score += NEXT_WEIGHT * TRANSITIONS[degree][following_degree]
            if _resolves_to(candidate.chord, following):
                score += RESOLUTION_BONUS

        if degree is not None:
            score += GENRE_DEGREE_BIAS[preferences.genre].get(degree, 0.0)
        score += GENRE_KIND_BIAS[preferences.genre].get(candidate.kind, 0.0)
        score += COMPLEXITY_KIND_WEIGHT[preferences.complexity].get(candidate.kind, 0.0)

        score -= REUSE_PENALTY * sum(1 for used in history if used.chord == candidate.chord)
        return score

    # Pool helpers

    @staticmethod
    def _degree_of(chord: Chord, key: Key) -> int | None:
        degree = key.pitch_to_degree(chord.root)
        return degree.degree if degree is not None else None

    @staticmethod
    def _suspensions(key: Key) -> list[Candidate]:
        result = []
        for degree, qualities in (
            (1, (ChordQuality.SUS2, ChordQuality.SUS4)),
            (4, (ChordQuality.SUS2,)),
            (5, (ChordQuality.SUS2, ChordQuality.SUS4, ChordQuality.DOMINANT_7_SUS4)),
        ):
            root = key.degree_to_pitch(ScaleDegree(degree))
            for quality in qualities:
                result.append(
                    Candidate(
                        Chord(root, quality, flats=key.prefers_flats),
                        CandidateKind.SUSPENDED,
                        degree,
                    )
                )
        return result

    @staticmethod
    def _secondary_dominants(key: Key, triads: list) -> list[Candidate]:
        """Dominant sevenths a fifth above each non-tonic, non-diminished degree."""
        result = []
        for _, chord in triads[1:]:
            if chord.quality == ChordQuality.DIMINISHED:
                continue
            root = chord.root.transpose(7)
            secondary = Chord(root, ChordQuality.DOMINANT_7, flats=key.prefers_flats)
            degree = key.pitch_to_degree(root)
            result.append(
                Candidate(
                    secondary,
                    CandidateKind.SECONDARY,
                    degree.degree if degree is not None else None,
                )
            )
        return result

    @staticmethod
    def _borrowed(key: Key) -> list[Candidate]:
        """Chords from the parallel key."""
        if key.is_minor:
            borrowed = [
                (ScaleDegree(5), ChordQuality.MAJOR, 5),
                (ScaleDegree(5), ChordQuality.DOMINANT_7, 5),
                (ScaleDegree(4), ChordQuality.MAJOR, 4),
            ]
        else:
            borrowed = [
                (ScaleDegree(4), ChordQuality.MINOR, 4),
                (ScaleDegree(7, -1), ChordQuality.MAJOR, 7),
                (ScaleDegree(6, -1), ChordQuality.MAJOR, 6),
                (ScaleDegree(3, -1), ChordQuality.MAJOR, 3),
            ]

        # Borrowed chords from the minor side read better with flats
        flats = key.prefers_flats or not key.is_minor
        return [
            Candidate(
                Chord(key.degree_to_pitch(scale_degree), quality, flats=flats),
                CandidateKind.BORROWED,
                degree,
            )
            for scale_degree, quality, degree in borrowed
        ]

    @staticmethod
    def _parse_chords(chords: list[str | None]) -> list[Chord | None]:
        parsed: list[Chord | None] = []
        for symbol in chords:
            if symbol is None:
                parsed.append(None)
                continue
            try:
                parsed.append(Chord.parse(symbol))
            except (ValueError, AttributeError):
                raise InvalidChordError(ErrorMessages.INVALID_CHORD.format(chord=symbol)) from None
        return parsed
