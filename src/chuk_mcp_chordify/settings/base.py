"""
Settings store template.

A settings store keeps one record per progression id. Records are created by
an explicit initialize, changed field by field, and removed either on demand
or by the progression cascade. Each store serializes its writes per id with
its own locks, independently of slot edits.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from chuk_mcp_chordify.constants import ErrorMessages
from chuk_mcp_chordify.errors import NotFoundError
from chuk_mcp_chordify.progression.locks import KeyedLocks
from chuk_mcp_chordify.progression.manager import ProgressionManager
from chuk_mcp_chordify.storage import YamlRecordStore

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class SettingsStore(ABC, Generic[RecordT]):
    """
    Per-progression settings records with cascade delete.

    initialize() on an id that already has a record is a no-op that returns
    the existing record; it never resets fields to their defaults.
    """

    record_type: ClassVar[type[BaseModel]]
    not_found_message: ClassVar[str]
    label: ClassVar[str]

    def __init__(self, progressions: ProgressionManager, storage: YamlRecordStore | None = None):
        """
        Initialize the store and register it for cascade delete.

        Args:
            progressions: Manager owning the progressions records are keyed by
            storage: Optional write-through YAML storage
        """
        self._progressions = progressions
        self._storage = storage
        self._records: dict[str, RecordT] = {}
        self.locks = KeyedLocks()
        progressions.register_dependent(self)

    @abstractmethod
    def _default(self, progression_id: str) -> RecordT:
        """Build the default record for a progression."""

    def load(self) -> int:
        """
        Load persisted records whose progression still exists.

        Call after the progression manager has loaded.
        """
        if self._storage is None:
            return 0

        loaded = 0
        for key, data in self._storage.load_all().items():
            try:
                record = self.record_type.model_validate(data)
            except PydanticValidationError:
                logger.warning(f"Skipping invalid {self.label} record: {key}")
                continue
            progression_id = record.progression_id  # type: ignore[attr-defined]
            if not self._progressions.exists(progression_id):
                logger.warning(f"Dropping orphaned {self.label} record: {progression_id}")
                self._storage.remove(key)
                continue
            self._records[progression_id] = record  # type: ignore[assignment]
            loaded += 1

        logger.info(f"Loaded {loaded} {self.label} record(s)")
        return loaded

    async def initialize(self, progression_id: str) -> RecordT:
        """
        Create the default record if none exists.

        Returns:
            The new record, or the existing one unchanged

        Raises:
            NotFoundError: If the progression does not exist
        """
        async with self.locks.hold(progression_id):
            # Checked under this store's lock: the cascade holds the same lock
            # while it removes the progression.
            if not self._progressions.exists(progression_id):
                raise NotFoundError(
                    ErrorMessages.PROGRESSION_NOT_FOUND.format(progression_id=progression_id)
                )

            existing = self._records.get(progression_id)
            if existing is not None:
                return existing.model_copy()

            record = self._default(progression_id)
            self._commit(progression_id, record)

        logger.info(f"Initialized {self.label} for {progression_id}")
        return record.model_copy()

    async def get(self, progression_id: str) -> RecordT:
        """
        Get the record for a progression.

        Raises:
            NotFoundError: If no record exists
        """
        return self._require(progression_id).model_copy()

    async def delete(self, progression_id: str) -> None:
        """
        Remove the record for a progression.

        Raises:
            NotFoundError: If no record exists
        """
        async with self.locks.hold(progression_id):
            self._require(progression_id)
            self.discard(progression_id)
        logger.info(f"Deleted {self.label} for {progression_id}")

    def remove_stored(self, progression_id: str) -> None:
        """Remove the persisted record without touching memory or locking."""
        if self._storage is not None:
            self._storage.remove(progression_id)

    def discard(self, progression_id: str) -> bool:
        """Drop a record without locking. Returns True if one existed."""
        if progression_id not in self._records:
            return False
        self.remove_stored(progression_id)
        del self._records[progression_id]
        return True

    async def _update(self, progression_id: str, **changes: Any) -> RecordT:
        """Replace validated fields of an existing record."""
        async with self.locks.hold(progression_id):
            record = self._require(progression_id).model_copy(update=changes)
            self._commit(progression_id, record)
        logger.debug(f"{self.label} for {progression_id} updated: {changes}")
        return record.model_copy()

    def _require(self, progression_id: str) -> RecordT:
        record = self._records.get(progression_id)
        if record is None:
            raise NotFoundError(self.not_found_message.format(progression_id=progression_id))
        return record

    def _commit(self, progression_id: str, record: RecordT) -> None:
        if self._storage is not None:
            self._storage.write(progression_id, record.to_dict())  # type: ignore[attr-defined]
        self._records[progression_id] = record
