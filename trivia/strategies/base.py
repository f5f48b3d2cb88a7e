"""Answer strategy interface used by the message interpreter."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Mapping, Sequence

from ..messages import MAX_OPTIONS, AnswerAck


def selectable_count(options: Sequence[str]) -> int:
    """Number of options that can be addressed by an answer slot."""
    return min(len(options), MAX_OPTIONS)


class AnswerStrategy(ABC):
    """Base interface for automatic, scripted, or human answer selection."""

    blocking: ClassVar[bool] = False

    def __init__(self, strategy_id: str):
        self.strategy_id = strategy_id

    def reset(self) -> None:
        """Reset internal state before a new session."""

    @abstractmethod
    def choose_answer(self, question: str, options: Sequence[str]) -> int:
        """Return the 1-based position of the chosen option."""

    def on_acknowledged(self, ack: AnswerAck) -> None:
        """Optional callback when the server acknowledges an answer."""

    def on_game_end(self, score: int | float) -> None:
        """Optional callback invoked when the game ends."""

    def debug_context(self) -> Mapping[str, Any] | None:
        """Optional diagnostics payload for logging around selection errors."""
        return None
