"""Game phase model tracked per participant."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .messages import AnswerIndex, InboundMessage
from .serialize import to_serializable


class GamePhase(str, Enum):
    """Client-side belief about where the game currently stands."""

    IDLE = "Idle"
    AWAITING_GAME = "AwaitingGame"
    AWAITING_QUESTION = "AwaitingQuestion"
    QUESTION_ACTIVE = "QuestionActive"
    ANSWER_ACKNOWLEDGED = "AnswerAcknowledged"
    ENDED = "Ended"
    NO_GAME_AVAILABLE = "NoGameAvailable"


@dataclass(frozen=True)
class PhaseState:
    """
    Snapshot produced by the most recent inbound message.

    Only the fields belonging to ``phase`` are populated; every accepted
    message replaces the whole snapshot.
    """

    phase: GamePhase = GamePhase.IDLE
    message: InboundMessage | None = None
    score: int | float | None = None
    seconds_till_game: int | float | None = None
    question: str | None = None
    options: tuple[str, ...] = field(default_factory=tuple)
    acknowledged_answer: AnswerIndex | None = None
    status: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable snapshot."""
        return {
            "phase": self.phase.value,
            "message": to_serializable(self.message),
            "score": self.score,
            "seconds_till_game": self.seconds_till_game,
            "question": self.question,
            "options": list(self.options),
            "acknowledged_answer": self.acknowledged_answer.value if self.acknowledged_answer else None,
            "status": self.status,
        }
