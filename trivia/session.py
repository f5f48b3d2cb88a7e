"""Game session: one connection, one interpreter, one strategy."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from uuid import uuid4

from .connection import GameConnection
from .errors import AnswerSelectionError, DecodeError, GameConnectionError, error_payload
from .events import EventType, SessionEvent, write_jsonl
from .interpreter import MessageInterpreter
from .messages import AnswerIndex, AnswerSubmission
from .phase import GamePhase
from .serialize import to_serializable
from .strategies.base import AnswerStrategy

logger = logging.getLogger(__name__)

TERMINATION_CLOSED = "closed"
TERMINATION_ERROR = "error"


@dataclass(frozen=True)
class SessionResult:
    """Structured outcome for a finished session."""

    session_id: str
    phase: GamePhase
    score: int | float | None
    termination: str
    questions_seen: int = 0
    answers_sent: int = 0
    decode_errors: int = 0
    selection_errors: int = 0
    error: str | None = None
    event_count: int = 0
    log_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable result object."""
        return {
            "session_id": self.session_id,
            "phase": self.phase.value,
            "score": self.score,
            "termination": self.termination,
            "questions_seen": self.questions_seen,
            "answers_sent": self.answers_sent,
            "decode_errors": self.decode_errors,
            "selection_errors": self.selection_errors,
            "error": self.error,
            "event_count": self.event_count,
            "log_path": self.log_path,
        }


class GameSession:
    """
    Drives one participant through a game.

    The session is the connection's listener: every inbound frame goes
    through the interpreter, and any reply is sent before the next frame is
    read. Decode and answer-selection failures are logged and skipped;
    transport failures propagate to the caller of `play`.
    """

    def __init__(
        self,
        connection: GameConnection,
        strategy: AnswerStrategy,
        *,
        prime_on_open: bool = False,
        session_id: str | None = None,
        event_log_path: str | Path | None = None,
    ):
        self.connection = connection
        self.strategy = strategy
        self.interpreter = MessageInterpreter(strategy)
        self.prime_on_open = prime_on_open
        self.session_id = session_id or f"session-{uuid4().hex[:8]}"
        self.event_log_path = event_log_path
        self.events: list[SessionEvent] = []
        self.answers_sent = 0
        self.decode_errors = 0
        self.selection_errors = 0
        self._termination: str | None = None
        self._error: Exception | None = None

    @property
    def phase(self) -> GamePhase:
        return self.interpreter.phase

    async def play(self, token: str) -> SessionResult:
        """Open the connection for ``token`` and run until the stream ends."""
        self.strategy.reset()
        try:
            await self.connection.open(token)
            await self.connection.serve(self)
        except Exception as exc:
            self._abort(exc)
            raise
        finally:
            self._write_log()
        return self.result()

    def result(self) -> SessionResult:
        state = self.interpreter.state
        return SessionResult(
            session_id=self.session_id,
            phase=state.phase,
            score=state.score,
            termination=self._termination or TERMINATION_CLOSED,
            questions_seen=self.interpreter.questions_seen,
            answers_sent=self.answers_sent,
            decode_errors=self.decode_errors,
            selection_errors=self.selection_errors,
            error=str(self._error) if self._error is not None else None,
            event_count=len(self.events),
            log_path=str(self.event_log_path) if self.event_log_path else None,
        )

    async def on_open(self) -> None:
        self.interpreter.on_connect()
        self._record(EventType.CONNECTED, {"url": self.connection.url, "strategy": self.strategy.strategy_id})
        logger.info("%s connected", self.session_id)
        if self.prime_on_open:
            await self._send(AnswerSubmission(answer_idx=AnswerIndex.ONE), priming=True)

    async def on_message(self, payload: str | bytes) -> None:
        try:
            if self.strategy.blocking:
                reply = await asyncio.to_thread(self.interpreter.handle, payload)
            else:
                reply = self.interpreter.handle(payload)
        except DecodeError as exc:
            self.decode_errors += 1
            logger.warning("%s dropped frame: %s", self.session_id, exc.reason)
            self._record(EventType.DECODE_ERROR, {"error": exc.to_dict()})
            return
        except AnswerSelectionError as exc:
            self.selection_errors += 1
            logger.warning("%s could not answer: %s", self.session_id, exc)
            self._record_inbound()
            self._record(
                EventType.SELECTION_ERROR,
                {"error": exc.to_dict(), "debug": to_serializable(self.strategy.debug_context())},
            )
            return

        self._record_inbound()
        if reply is not None:
            await self._send(reply)

    async def on_close(self) -> None:
        self._termination = TERMINATION_CLOSED
        self.interpreter.on_disconnect()
        self._record(EventType.CLOSED, {"phase": self.phase.value})
        logger.info("%s closed in phase %s", self.session_id, self.phase.value)

    async def on_error(self, error: GameConnectionError) -> None:
        self._termination = TERMINATION_ERROR
        self._error = error
        self.interpreter.on_disconnect()
        self._record(EventType.ERROR, {"phase": self.phase.value, "error": error.to_dict()})
        logger.error("%s ended abnormally in phase %s: %s", self.session_id, self.phase.value, error)

    def _abort(self, error: Exception) -> None:
        self._termination = TERMINATION_ERROR
        self._error = error
        self.interpreter.on_disconnect()
        self._record(EventType.ERROR, {"phase": self.phase.value, "error": error_payload(error)})
        logger.error("%s aborted in phase %s: %s", self.session_id, self.phase.value, error)

    async def _send(self, reply: AnswerSubmission, *, priming: bool = False) -> None:
        await self.connection.send(reply)
        self.answers_sent += 1
        self._record(EventType.REPLY, {"message": reply, "priming": priming})

    def _record_inbound(self) -> None:
        state = self.interpreter.state
        logger.info("%s phase %s", self.session_id, state.phase.value)
        self._record(EventType.INBOUND, {"state": state.to_dict()})

    def _record(self, event_type: EventType, payload: dict[str, Any]) -> None:
        self.events.append(
            SessionEvent.create(
                event_type=event_type,
                session_id=self.session_id,
                sequence=len(self.events),
                payload=payload,
            )
        )

    def _write_log(self) -> None:
        if self.event_log_path is None:
            return
        write_jsonl(self.event_log_path, self.events)
