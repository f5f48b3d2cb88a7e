"""Interactive terminal strategy."""

from __future__ import annotations

from typing import Callable, Sequence

from ..errors import AnswerSelectionError
from .base import AnswerStrategy, selectable_count


class HumanCLIStrategy(AnswerStrategy):
    """Prompts for an answer in a terminal."""

    blocking = True

    def __init__(
        self,
        strategy_id: str = "human",
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        super().__init__(strategy_id=strategy_id)
        self._input = input_fn
        self._output = output_fn

    def choose_answer(self, question: str, options: Sequence[str]) -> int:
        """Show the question with 1-based options and read a choice."""
        available = selectable_count(options)
        if available == 0:
            raise AnswerSelectionError(self.strategy_id, None, "No options available.")

        self._output("\n=== Question ===")
        self._output(question)
        for position, option in enumerate(options[:available], start=1):
            self._output(f"[{position}] {option}")
        while True:
            try:
                raw = self._input("Choose answer: ").strip()
            except EOFError as exc:
                raise AnswerSelectionError(self.strategy_id, None, "Input closed.") from exc
            try:
                choice = int(raw)
            except ValueError:
                self._output("Expected an integer.")
                continue
            if 1 <= choice <= available:
                return choice
            self._output(f"Choose a number between 1 and {available}.")
