"""
YAML record storage - write-through persistence for the stores.

Each record is one YAML file named `<key><suffix>` inside a directory. Stores
write a record after a mutation is validated and before it is committed in
memory, so a failed write leaves the in-memory state untouched.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


class YamlRecordStore:
    """A directory of YAML documents, one per record key."""

    def __init__(self, directory: Path, suffix: str):
        """
        Initialize the store.

        Args:
            directory: Directory holding the record files
            suffix: File suffix, e.g. '.progression.yaml'
        """
        self.directory = directory
        self.suffix = suffix

    def write(self, key: str, data: dict[str, Any]) -> Path:
        """Write a record, replacing any previous version."""
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._get_path(key)
        tmp_path = path.with_name(path.name + ".tmp")

        with open(tmp_path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        tmp_path.replace(path)

        return path

    def remove(self, key: str) -> bool:
        """Remove a record. Returns True if a file was deleted."""
        path = self._get_path(key)
        if path.exists():
            path.unlink()
            return True
        return False

    def load_all(self) -> dict[str, dict[str, Any]]:
        """
        Load every record in the directory.

        Returns:
            Mapping of record key to parsed document
        """
        if not self.directory.exists():
            return {}

        records: dict[str, dict[str, Any]] = {}
        for path in sorted(self.directory.glob(f"*{self.suffix}")):
            try:
                with open(path) as f:
                    data = yaml.safe_load(f)
            except (OSError, yaml.YAMLError):
                logger.warning(f"Skipping unreadable record file: {path}")
                continue
            if not isinstance(data, dict):
                logger.warning(f"Skipping malformed record file: {path}")
                continue
            records[path.name[: -len(self.suffix)]] = data

        return records

    def _get_path(self, key: str) -> Path:
        safe_key = key.replace(" ", "_").replace("/", "_")
        return self.directory / f"{safe_key}{self.suffix}"
