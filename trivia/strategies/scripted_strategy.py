"""Scripted strategy for tests and replays."""

from __future__ import annotations

from typing import Callable, Sequence

from ..errors import AnswerSelectionError
from .base import AnswerStrategy


class ScriptedStrategy(AnswerStrategy):
    """Runs a user-provided policy callable, or replays fixed positions in order."""

    def __init__(
        self,
        strategy_id: str = "scripted",
        policy: Callable[[str, Sequence[str]], int] | None = None,
        positions: Sequence[int] | None = None,
    ):
        super().__init__(strategy_id=strategy_id)
        if policy is not None and positions is not None:
            raise ValueError("ScriptedStrategy takes either a policy or positions, not both.")
        if policy is None and positions is None:
            raise ValueError("ScriptedStrategy requires a policy(question, options) callable or positions.")
        self.policy = policy
        self.positions = list(positions) if positions is not None else None
        self._cursor = 0
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    def reset(self) -> None:
        self._cursor = 0
        self.calls = []

    def choose_answer(self, question: str, options: Sequence[str]) -> int:
        """Delegate to the configured policy or the next scripted position."""
        self.calls.append((question, tuple(options)))
        if self.policy is not None:
            return self.policy(question, options)
        if self._cursor >= len(self.positions):
            raise AnswerSelectionError(self.strategy_id, None, "Scripted positions exhausted.")
        position = self.positions[self._cursor]
        self._cursor += 1
        return position
