"""Random baseline strategy."""

from __future__ import annotations

import hashlib
import random
from typing import Sequence

from ..errors import AnswerSelectionError
from .base import AnswerStrategy, selectable_count


class RandomStrategy(AnswerStrategy):
    """Chooses uniformly among the addressable options."""

    def __init__(self, strategy_id: str = "random", seed: int | None = None):
        super().__init__(strategy_id=strategy_id)
        self.seed = seed
        self._rng = random.Random()
        self.reset()

    def reset(self) -> None:
        """Reseed so a given seed and strategy id replay the same picks."""
        if self.seed is None:
            self._rng.seed()
            return
        material = f"{self.seed}:{self.strategy_id}".encode("utf-8")
        derived_seed = int.from_bytes(hashlib.sha256(material).digest()[:8], byteorder="big", signed=False)
        self._rng.seed(derived_seed)

    def choose_answer(self, question: str, options: Sequence[str]) -> int:
        """Pick a random addressable option."""
        available = selectable_count(options)
        if available == 0:
            raise AnswerSelectionError(self.strategy_id, None, "No options available.")
        return self._rng.randint(1, available)
