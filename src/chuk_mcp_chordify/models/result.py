"""
Tagged tool results.

Every tool answers with exactly one of:

    Ok   -> {"status": "success", ...payload}
    Err  -> {"status": "error", "error": message, "error_type": kind}

Domain errors become Err with their own kind; unexpected exceptions become
Err with kind "internal".
"""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, Field

from chuk_mcp_chordify.errors import ChordifyError, ErrorKind


class Ok(BaseModel):
    """Successful result carrying a payload mapping."""

    status: Literal["success"] = "success"
    payload: dict[str, Any] = Field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps({"status": self.status, **self.payload})


class Err(BaseModel):
    """Failed result carrying an error kind and message."""

    status: Literal["error"] = "error"
    kind: ErrorKind
    message: str

    @classmethod
    def from_exception(cls, exc: Exception) -> Err:
        if isinstance(exc, ChordifyError):
            return cls(kind=exc.kind, message=exc.message)
        return cls(kind=ErrorKind.INTERNAL, message=str(exc) or type(exc).__name__)

    def to_json(self) -> str:
        return json.dumps(
            {"status": self.status, "error": self.message, "error_type": self.kind.value}
        )


def ok(**payload: Any) -> str:
    """Render a success result as JSON."""
    return Ok(payload=payload).to_json()


def err(exc: Exception) -> str:
    """Render an exception as an error result in JSON."""
    return Err.from_exception(exc).to_json()
