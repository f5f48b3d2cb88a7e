"""Message interpreter and game-phase tracker.

The tracker is a Mealy machine with a total transition relation: the next
phase depends only on the kind of the inbound message, never on the current
phase, and the only output is the answer sent in response to a question.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from .errors import AnswerSelectionError
from .messages import (
    AnswerAck,
    AnswerIndex,
    AnswerSubmission,
    GameEnd,
    GameStart,
    InboundMessage,
    NoGame,
    Question,
    TimeTillGame,
    decode_message,
)
from .phase import GamePhase, PhaseState
from .strategies.base import AnswerStrategy, selectable_count

logger = logging.getLogger(__name__)


class MessageInterpreter:
    """Decodes frames, advances the game phase and decides on replies."""

    def __init__(self, strategy: AnswerStrategy):
        self.strategy = strategy
        self._state = PhaseState()
        self.history: list[GamePhase] = []
        self.connected = False
        self.questions_seen = 0

    @property
    def state(self) -> PhaseState:
        return self._state

    @property
    def phase(self) -> GamePhase:
        return self._state.phase

    def on_connect(self) -> None:
        self.connected = True

    def on_disconnect(self) -> None:
        """Record the end of the stream; the last phase is kept as the outcome."""
        self.connected = False

    def decode(self, payload: str | bytes) -> InboundMessage:
        return decode_message(payload)

    def handle(self, payload: str | bytes) -> AnswerSubmission | None:
        """Decode one raw frame and apply it; `DecodeError` leaves the phase untouched."""
        return self.apply(self.decode(payload))

    def apply(self, message: InboundMessage) -> AnswerSubmission | None:
        """Advance to the phase implied by ``message`` and return the reply, if any."""
        if isinstance(message, TimeTillGame):
            self._advance(PhaseState(phase=GamePhase.AWAITING_GAME, message=message, seconds_till_game=message.time))
            return None

        if isinstance(message, GameStart):
            self._advance(PhaseState(phase=GamePhase.AWAITING_QUESTION, message=message))
            return None

        if isinstance(message, Question):
            self._advance(
                PhaseState(
                    phase=GamePhase.QUESTION_ACTIVE,
                    message=message,
                    question=message.question,
                    options=tuple(message.options),
                )
            )
            self.questions_seen += 1
            return AnswerSubmission(answer_idx=self._select_answer(message))

        if isinstance(message, AnswerAck):
            self._advance(
                PhaseState(
                    phase=GamePhase.ANSWER_ACKNOWLEDGED,
                    message=message,
                    acknowledged_answer=message.answer_idx,
                    status=message.status,
                )
            )
            self._notify(self.strategy.on_acknowledged, message)
            return None

        if isinstance(message, NoGame):
            self._advance(PhaseState(phase=GamePhase.NO_GAME_AVAILABLE, message=message))
            return None

        if isinstance(message, GameEnd):
            self._advance(PhaseState(phase=GamePhase.ENDED, message=message, score=message.score))
            self._notify(self.strategy.on_game_end, message.score)
            return None

        raise TypeError(f"Unsupported inbound message: {type(message).__name__}")

    def _advance(self, state: PhaseState) -> None:
        previous = self._state.phase
        self._state = state
        self.history.append(state.phase)
        logger.debug("Phase %s -> %s", previous.value, state.phase.value)

    def _notify(self, hook: Callable[[Any], None], value: Any) -> None:
        try:
            hook(value)
        except Exception:
            logger.exception("Strategy %s failed in %s", self.strategy.strategy_id, hook.__name__)

    def _select_answer(self, message: Question) -> AnswerIndex:
        available = selectable_count(message.options)
        if available == 0:
            raise AnswerSelectionError(self.strategy.strategy_id, None, "Question offered no options.")
        try:
            choice = self.strategy.choose_answer(message.question, list(message.options))
        except AnswerSelectionError:
            raise
        except Exception as exc:
            raise AnswerSelectionError(self.strategy.strategy_id, None, f"Strategy failed: {exc}") from exc

        if isinstance(choice, bool) or not isinstance(choice, int) or not 1 <= choice <= available:
            raise AnswerSelectionError(
                self.strategy.strategy_id,
                choice,
                f"Expected a position between 1 and {available}.",
            )
        return AnswerIndex.from_position(choice)
