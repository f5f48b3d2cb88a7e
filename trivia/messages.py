"""Wire models for the game server's tagged JSON frames.

Every frame is a single JSON object whose ``type`` field names one of a
closed set of kinds. Inbound kinds are modelled as a pydantic discriminated
union; the only outbound kind is an answer submission.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, TypeAdapter, ValidationError

from .errors import DecodeError


class AnswerIndex(str, Enum):
    """Answer slot identifiers used on the wire."""

    ONE = "One"
    TWO = "Two"
    THREE = "Three"
    FOUR = "Four"

    @classmethod
    def from_position(cls, position: int) -> "AnswerIndex":
        """Map a 1-based option position to its wire identifier."""
        members = list(cls)
        if isinstance(position, bool) or not isinstance(position, int) or not 1 <= position <= len(members):
            raise ValueError(f"Answer position must be an integer in 1..{len(members)}, got {position!r}.")
        return members[position - 1]

    @property
    def position(self) -> int:
        """1-based option position for this identifier."""
        return list(type(self)).index(self) + 1


MAX_OPTIONS = len(AnswerIndex)


class _Frame(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)


class TimeTillGame(_Frame):
    """Countdown before the next game starts."""

    type: Literal["TimeTillGame"] = "TimeTillGame"
    time: StrictInt | StrictFloat


class Question(_Frame):
    """A live question; options keep the server's order."""

    type: Literal["Question"] = "Question"
    question: StrictStr
    options: list[StrictStr]


class AnswerAck(_Frame):
    """Server acknowledgment of a previously submitted answer."""

    type: Literal["Answer"] = "Answer"
    status: StrictStr
    answer_idx: AnswerIndex


class NoGame(_Frame):
    type: Literal["NoGame"] = "NoGame"


class GameStart(_Frame):
    type: Literal["GameStart"] = "GameStart"


class GameEnd(_Frame):
    """Game over; ``score`` is this participant's final tally."""

    type: Literal["GameEnd"] = "GameEnd"
    score: StrictInt | StrictFloat


InboundMessage = Annotated[
    Union[TimeTillGame, Question, AnswerAck, NoGame, GameStart, GameEnd],
    Field(discriminator="type"),
]

INBOUND_KINDS = frozenset({"TimeTillGame", "Question", "Answer", "NoGame", "GameStart", "GameEnd"})


class AnswerSubmission(_Frame):
    """Client answer to the currently active question."""

    type: Literal["Answer"] = "Answer"
    answer_idx: AnswerIndex


OutboundMessage = AnswerSubmission

_INBOUND_ADAPTER: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


def decode_message(payload: str | bytes) -> InboundMessage:
    """Decode one raw frame into an inbound message or raise `DecodeError`."""
    if isinstance(payload, (bytes, bytearray)):
        try:
            text = bytes(payload).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(payload, "frame is not valid UTF-8") from exc
    else:
        text = payload

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(payload, f"invalid JSON ({exc.msg})") from exc
    except (ValueError, RecursionError) as exc:
        raise DecodeError(payload, f"invalid JSON ({type(exc).__name__})") from exc

    if not isinstance(data, dict):
        raise DecodeError(payload, "frame is not a JSON object")
    kind = data.get("type")
    if kind is None:
        raise DecodeError(payload, "missing 'type' discriminator")
    if not isinstance(kind, str) or kind not in INBOUND_KINDS:
        raise DecodeError(payload, f"unknown message type {kind!r}")

    try:
        return _INBOUND_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise DecodeError(payload, _describe_validation_error(exc)) from exc


def encode_message(message: OutboundMessage) -> str:
    """Serialize an outbound message to its compact JSON wire form."""
    return message.model_dump_json()
