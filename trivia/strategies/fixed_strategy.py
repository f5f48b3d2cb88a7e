"""Always-the-same-slot strategy."""

from __future__ import annotations

from typing import Sequence

from ..errors import AnswerSelectionError
from ..messages import MAX_OPTIONS
from .base import AnswerStrategy, selectable_count


class FixedStrategy(AnswerStrategy):
    """Always picks the configured position, clamped to the options offered."""

    def __init__(self, position: int = 1, strategy_id: str | None = None):
        if isinstance(position, bool) or not isinstance(position, int) or not 1 <= position <= MAX_OPTIONS:
            raise ValueError(f"FixedStrategy position must be in 1..{MAX_OPTIONS}, got {position!r}.")
        super().__init__(strategy_id=strategy_id or f"fixed-{position}")
        self.position = position

    def choose_answer(self, question: str, options: Sequence[str]) -> int:
        available = selectable_count(options)
        if available == 0:
            raise AnswerSelectionError(self.strategy_id, None, "No options available.")
        return min(self.position, available)
