"""
Server configuration.

A ChordifyConfig is built once at start-up and passed to every component that
needs it. Values come from a YAML file or fall back to the defaults below.

Example config.yaml:

    data_dir: ./data
    output_dir: ./output
    log_level: DEBUG
    default_instrument: Guitar
    default_key: Am
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from chuk_mcp_chordify.constants import (
    DEFAULT_COMPLEXITY,
    DEFAULT_GENRE,
    DEFAULT_INSTRUMENT,
    DEFAULT_KEY,
    DEFAULT_SECONDS_PER_CHORD,
    MAX_SECONDS_PER_CHORD,
    MIN_SECONDS_PER_CHORD,
    ComplexityLevel,
    Genre,
    Instrument,
)
from chuk_mcp_chordify.core.theory import is_valid_key

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CHORDIFY_CONFIG"

_ENUM_FIELDS: dict[str, type[Instrument] | type[Genre] | type[ComplexityLevel]] = {
    "default_instrument": Instrument,
    "default_genre": Genre,
    "default_complexity": ComplexityLevel,
}


class ChordifyConfig(BaseModel):
    """Configuration for the chord progression server."""

    data_dir: Path | None = Field(
        None, description="Directory for YAML persistence; in-memory only when unset"
    )
    output_dir: Path = Field(Path("output"), description="Directory for exported MIDI files")
    log_level: str = Field("INFO", description="Root log level")
    default_instrument: Instrument = Field(DEFAULT_INSTRUMENT)
    default_seconds_per_chord: float = Field(
        DEFAULT_SECONDS_PER_CHORD, ge=MIN_SECONDS_PER_CHORD, le=MAX_SECONDS_PER_CHORD
    )
    default_genre: Genre = Field(DEFAULT_GENRE)
    default_complexity: ComplexityLevel = Field(DEFAULT_COMPLEXITY)
    default_key: str = Field(DEFAULT_KEY)

    model_config = {"extra": "forbid"}

    @field_validator(*_ENUM_FIELDS, mode="before")
    @classmethod
    def coerce_enums(cls, v: Any, info: ValidationInfo) -> Any:
        # Case-insensitive, like the tool arguments
        if isinstance(v, str) and info.field_name is not None:
            return _ENUM_FIELDS[info.field_name](v)
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("default_key")
    @classmethod
    def validate_default_key(cls, v: str) -> str:
        if not is_valid_key(v):
            raise ValueError(f"Invalid key: {v}")
        return v.strip()

    @classmethod
    def load(cls, path: Path) -> ChordifyConfig:
        """
        Load configuration from a YAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            pydantic.ValidationError: If a value is invalid
        """
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}

        logger.info(f"Loaded config from {path}")
        return cls.model_validate(data)

    @classmethod
    def from_env(cls) -> ChordifyConfig:
        """Load from the file named by CHORDIFY_CONFIG, or use defaults."""
        path = os.environ.get(CONFIG_ENV_VAR)
        if path:
            return cls.load(Path(path))
        return cls()
