"""Session event schema and JSONL logging utilities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from time import time
from typing import Any, Iterable

from .serialize import json_dumps, to_serializable


class EventType(str, Enum):
    """Standard event types recorded by a game session."""

    CONNECTED = "connected"
    INBOUND = "inbound"
    DECODE_ERROR = "decode_error"
    REPLY = "reply"
    SELECTION_ERROR = "selection_error"
    CLOSED = "closed"
    ERROR = "error"


@dataclass(frozen=True)
class SessionEvent:
    """Single replay event recorded during a session."""

    event_type: EventType
    session_id: str
    sequence: int
    timestamp_ms: int
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Return JSON-serializable event data."""
        return {
            "event_type": self.event_type.value,
            "session_id": self.session_id,
            "sequence": self.sequence,
            "timestamp_ms": self.timestamp_ms,
            "payload": to_serializable(self.payload),
        }

    @classmethod
    def create(cls, event_type: EventType, session_id: str, sequence: int, payload: dict[str, Any]) -> "SessionEvent":
        """Construct an event with the current wall-clock timestamp."""
        return cls(
            event_type=event_type,
            session_id=session_id,
            sequence=sequence,
            timestamp_ms=int(time() * 1000),
            payload=payload,
        )


def write_jsonl(path: str | Path, events: Iterable[SessionEvent]) -> None:
    """Persist events as JSONL to disk."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as handle:
        for event in events:
            handle.write(json_dumps(event.to_dict()))
            handle.write("\n")
