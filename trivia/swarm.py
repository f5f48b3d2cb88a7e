"""Run many isolated participant sessions concurrently against one server."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Sequence

from .config import ClientConfig
from .connection import Connector, GameConnection
from .errors import error_payload
from .registration import register
from .session import TERMINATION_ERROR, GameSession, SessionResult
from .strategies.base import AnswerStrategy

logger = logging.getLogger(__name__)

TokenProvider = Callable[[str, str], str]
StrategyFactory = Callable[[str], AnswerStrategy]


@dataclass(frozen=True)
class SwarmSummary:
    """Aggregated output from a set of concurrent sessions."""

    results: list[SessionResult]
    failures: list[dict[str, Any]] = field(default_factory=list)
    scores: dict[str, int | float | None] = field(default_factory=dict)
    phase_counts: dict[str, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True when no session failed or ended on a transport error."""
        return not self.failures and all(result.termination != TERMINATION_ERROR for result in self.results)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable summary."""
        return {
            "results": [result.to_dict() for result in self.results],
            "failures": list(self.failures),
            "scores": dict(self.scores),
            "phase_counts": dict(self.phase_counts),
            "ok": self.ok,
        }


def participant_names(prefix: str, count: int) -> list[str]:
    """Stable usernames for ``count`` participants."""
    if count < 1:
        raise ValueError("At least one participant is required.")
    if count == 1:
        return [prefix]
    return [f"{prefix}-{index}" for index in range(1, count + 1)]


class Swarm:
    """High-level interface for running many sessions at once."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        token_provider: TokenProvider | None = None,
        connect: Connector | None = None,
    ):
        self.config = config or ClientConfig()
        self.token_provider = token_provider or self._register
        self._connect = connect

    def _register(self, username: str, password: str) -> str:
        return register(self.config.http_url, username, password, timeout_sec=self.config.http_timeout_sec)

    def new_connection(self) -> GameConnection:
        return GameConnection(
            self.config.resolved_ws_url,
            path_template=self.config.path_template,
            open_timeout_sec=self.config.open_timeout_sec,
            connect=self._connect,
        )

    async def run(
        self,
        usernames: Sequence[str],
        strategy_factory: StrategyFactory,
        *,
        password: str = "",
        tokens: Sequence[str] | None = None,
    ) -> SwarmSummary:
        """Play one session per username and summarize the outcomes."""
        if tokens is not None and len(tokens) != len(usernames):
            raise ValueError("tokens must match usernames one-to-one.")

        outcomes = await asyncio.gather(
            *(
                self._play_one(
                    username,
                    strategy_factory,
                    password=password,
                    token=tokens[index] if tokens is not None else None,
                )
                for index, username in enumerate(usernames)
            )
        )

        results: list[SessionResult] = []
        failures: list[dict[str, Any]] = []
        for outcome in outcomes:
            if isinstance(outcome, SessionResult):
                results.append(outcome)
            else:
                failures.append(outcome)
        return self._summarize(results, failures)

    async def _play_one(
        self,
        username: str,
        strategy_factory: StrategyFactory,
        *,
        password: str,
        token: str | None,
    ) -> SessionResult | dict[str, Any]:
        """Play one participant; any failure is returned as a failure record."""
        session: GameSession | None = None
        try:
            if token is None:
                token = await asyncio.to_thread(self.token_provider, username, password)
            log_path = None
            if self.config.event_log_dir is not None:
                log_path = Path(self.config.event_log_dir) / f"{username}.jsonl"
            session = GameSession(
                self.new_connection(),
                strategy_factory(username),
                prime_on_open=self.config.prime_on_open,
                session_id=username,
                event_log_path=log_path,
            )
            return await session.play(token)
        except Exception as exc:
            logger.error("Session for %s failed: %s", username, exc)
            failure: dict[str, Any] = {"participant": username, "error": error_payload(exc)}
            if session is not None:
                failure["result"] = session.result().to_dict()
            return failure

    def _summarize(self, results: Sequence[SessionResult], failures: list[dict[str, Any]]) -> SwarmSummary:
        phase_counts = Counter(result.phase.value for result in results)
        return SwarmSummary(
            results=list(results),
            failures=failures,
            scores={result.session_id: result.score for result in results},
            phase_counts=dict(phase_counts),
        )
