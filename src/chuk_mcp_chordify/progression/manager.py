"""
Progression Manager - owns the ordered slot sequence of every progression.

The manager is the only ordering authority. Every position-bearing operation
runs inside the progression's exclusive section and checks positions against
the length it finds there, never against a length the caller remembers.

Edits are copy-on-write: a working copy is mutated, persisted, and then
swapped in with a single assignment. Readers therefore see either the old or
the new progression, never a half-applied edit, and a failed edit leaves the
stored progression untouched.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from chuk_mcp_chordify.constants import ErrorMessages
from chuk_mcp_chordify.core.theory import is_valid_chord
from chuk_mcp_chordify.errors import ConflictError, InvalidChordError, NotFoundError
from chuk_mcp_chordify.models.progression import Progression, ProgressionSummary, validate_name
from chuk_mcp_chordify.progression.locks import KeyedLocks
from chuk_mcp_chordify.storage import YamlRecordStore

logger = logging.getLogger(__name__)


class ProgressionDependent(Protocol):
    """A side table keyed by progression id that is deleted with its progression."""

    locks: KeyedLocks

    def remove_stored(self, progression_id: str) -> None:
        """Remove the persisted record only. Called with its lock held."""
        ...

    def discard(self, progression_id: str) -> bool:
        """Drop the record for `progression_id`. Called with its lock held."""
        ...


class ProgressionManager:
    """
    Manages progression lifecycle and slot edits.

    All operations are async and serialized per progression id. Operations on
    different progressions never wait on each other.
    """

    def __init__(self, storage: YamlRecordStore | None = None):
        """
        Initialize the manager.

        Args:
            storage: Optional write-through YAML storage
        """
        self._storage = storage
        self._progressions: dict[str, Progression] = {}
        self._locks = KeyedLocks()
        self._dependents: list[ProgressionDependent] = []

    def register_dependent(self, dependent: ProgressionDependent) -> None:
        """Register a settings store for cascade delete."""
        self._dependents.append(dependent)

    def load(self) -> int:
        """
        Load persisted progressions into memory.

        Returns:
            Number of progressions loaded
        """
        if self._storage is None:
            return 0

        records: list[Progression] = []
        for key, data in self._storage.load_all().items():
            try:
                records.append(Progression.from_dict(data))
            except PydanticValidationError:
                logger.warning(f"Skipping invalid progression record: {key}")

        # Files come back in id order; listing is in creation order
        for progression in sorted(records, key=lambda p: p.created):
            self._progressions[progression.id] = progression
        loaded = len(records)

        logger.info(f"Loaded {loaded} progression(s)")
        return loaded

    def exists(self, progression_id: str) -> bool:
        return progression_id in self._progressions

    # Lifecycle

    async def create(self, name: str) -> Progression:
        """
        Create a new, empty progression.

        Args:
            name: Display name

        Returns:
            The created Progression

        Raises:
            ValidationError: If the name is blank or too long
        """
        normalized = validate_name(name)
        progression_id = str(uuid.uuid4())

        async with self._locks.hold(progression_id):
            if progression_id in self._progressions:
                raise ConflictError(
                    ErrorMessages.ID_CONFLICT.format(progression_id=progression_id)
                )
            progression = Progression(id=progression_id, name=normalized)
            self._commit(progression)

        logger.info(f"Created progression {progression_id} ({normalized!r})")
        return progression.model_copy(deep=True)

    async def get(self, progression_id: str) -> Progression:
        """
        Get a detached copy of a progression.

        Raises:
            NotFoundError: If the id is unknown
        """
        return self._require(progression_id).model_copy(deep=True)

    async def list_progressions(self) -> list[ProgressionSummary]:
        """List id and name of every progression, in creation order."""
        return [progression.summary() for progression in list(self._progressions.values())]

    async def rename(self, progression_id: str, name: str) -> Progression:
        """Rename a progression. The id is unchanged."""
        async with self._edit(progression_id) as progression:
            progression.rename(name)
        return progression.model_copy(deep=True)

    async def delete(self, progression_id: str) -> None:
        """
        Delete a progression and every settings record keyed by its id.

        The progression's lock and then the same id's lock in every
        registered dependent are held while the records are removed, so no
        settings write can interleave with the cascade.

        Raises:
            NotFoundError: If the id is unknown
        """
        async with self._locks.hold(progression_id):
            self._require(progression_id)

            async with AsyncExitStack() as stack:
                for dependent in self._dependents:
                    await stack.enter_async_context(dependent.locks.hold(progression_id))

                # Every file is removed before any in-memory record
                for dependent in self._dependents:
                    dependent.remove_stored(progression_id)
                if self._storage is not None:
                    self._storage.remove(progression_id)

                del self._progressions[progression_id]

                cascaded = sum(
                    1 for dependent in self._dependents if dependent.discard(progression_id)
                )

        logger.info(f"Deleted progression {progression_id} ({cascaded} settings record(s))")

    # Slot edits

    async def add_slot(self, progression_id: str) -> Progression:
        """
        Append one empty slot.

        Returns:
            The updated Progression; the new slot is the last one
        """
        async with self._edit(progression_id) as progression:
            position = progression.add_slot()
        logger.debug(f"{progression_id}: added slot {position}")
        return progression.model_copy(deep=True)

    async def set_chord(self, progression_id: str, position: int, chord: str) -> Progression:
        """
        Assign a chord to an existing slot.

        Raises:
            NotFoundError: If the id is unknown
            InvalidChordError: If the chord fails validation
            PositionOutOfRangeError: If position >= current length
        """
        async with self._edit(progression_id) as progression:
            if not is_valid_chord(chord):
                raise InvalidChordError(ErrorMessages.INVALID_CHORD.format(chord=chord))
            progression.set_chord(position, chord.strip())
        logger.debug(f"{progression_id}: slot {position} = {chord.strip()}")
        return progression.model_copy(deep=True)

    async def delete_chord(self, progression_id: str, position: int) -> Progression:
        """Clear the chord at `position`; the slot stays and the length is unchanged."""
        async with self._edit(progression_id) as progression:
            progression.clear_chord(position)
        logger.debug(f"{progression_id}: cleared slot {position}")
        return progression.model_copy(deep=True)

    async def delete_slot(self, progression_id: str, position: int) -> Progression:
        """
        Remove the slot at `position`.

        Every later slot moves down one position, so positions cached by a
        caller before this call are stale afterwards.
        """
        async with self._edit(progression_id) as progression:
            progression.remove_slot(position)
        logger.debug(f"{progression_id}: removed slot {position}")
        return progression.model_copy(deep=True)

    async def reorder_slots(
        self, progression_id: str, old_position: int, new_position: int
    ) -> Progression:
        """
        Move the slot at `old_position` to `new_position`.

        The slot is removed first and then inserted at `new_position` of the
        shortened sequence. Equal positions are a no-op once validated.
        """
        async with self._edit(progression_id) as progression:
            progression.move_slot(old_position, new_position)
        logger.debug(f"{progression_id}: moved slot {old_position} -> {new_position}")
        return progression.model_copy(deep=True)

    # Internals

    def _require(self, progression_id: str) -> Progression:
        progression = self._progressions.get(progression_id)
        if progression is None:
            raise NotFoundError(
                ErrorMessages.PROGRESSION_NOT_FOUND.format(progression_id=progression_id)
            )
        return progression

    @asynccontextmanager
    async def _edit(self, progression_id: str) -> AsyncIterator[Progression]:
        """Yield a working copy under the lock and commit it if the block succeeds."""
        async with self._locks.hold(progression_id):
            working = self._require(progression_id).model_copy(deep=True)
            yield working
            self._commit(working)

    def _commit(self, progression: Progression) -> None:
        if self._storage is not None:
            self._storage.write(progression.id, progression.to_dict())
        self._progressions[progression.id] = progression
