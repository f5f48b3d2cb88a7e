"""Strategy that matches displayed option text against preferred keywords."""

from __future__ import annotations

from typing import Sequence

from ..errors import AnswerSelectionError
from .base import AnswerStrategy, selectable_count


class KeywordStrategy(AnswerStrategy):
    """
    Picks the first option whose text contains a preferred keyword.

    Keywords are tried in priority order and compared case-insensitively.
    When nothing matches, ``fallback_position`` is used (clamped to the offer).
    """

    def __init__(self, keywords: Sequence[str], strategy_id: str = "keyword", fallback_position: int = 1):
        super().__init__(strategy_id=strategy_id)
        self.keywords = [keyword.strip().lower() for keyword in keywords if keyword.strip()]
        if not self.keywords:
            raise ValueError("KeywordStrategy requires at least one non-empty keyword.")
        self.fallback_position = fallback_position

    def choose_answer(self, question: str, options: Sequence[str]) -> int:
        available = selectable_count(options)
        if available == 0:
            raise AnswerSelectionError(self.strategy_id, None, "No options available.")
        lowered = [option.lower() for option in options[:available]]
        for keyword in self.keywords:
            for index, text in enumerate(lowered):
                if keyword in text:
                    return index + 1
        return max(1, min(self.fallback_position, available))
