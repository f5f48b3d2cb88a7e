"""Concurrency, isolation and swarm orchestration tests."""

from __future__ import annotations

import asyncio

import pytest

from trivia.config import ClientConfig
from trivia.connection import GameConnection
from trivia.errors import RegistrationError
from trivia.phase import GamePhase
from trivia.session import GameSession
from trivia.strategies.fixed_strategy import FixedStrategy
from trivia.strategies.scripted_strategy import ScriptedStrategy
from trivia.swarm import Swarm, participant_names
from ws_fakes import FakeConnector, ScriptedSocket

STREAM_ONE = [
    '{"type":"TimeTillGame","time":2}',
    '{"type":"GameStart"}',
    '{"type":"Question","question":"Q1","options":["A","B","C","D"]}',
    '{"type":"GameEnd","score":10}',
]
STREAM_TWO = [
    '{"type":"NoGame"}',
    '{"type":"TimeTillGame","time":9}',
    '{"type":"Question","question":"Q1","options":["A","B"]}',
    '{"type":"Answer","status":"Correct","answer_idx":"Two"}',
]


def test_concurrent_sessions_do_not_share_phase() -> None:
    first_socket = ScriptedSocket(STREAM_ONE)
    second_socket = ScriptedSocket(STREAM_TWO)
    first = GameSession(GameConnection("ws://host", connect=FakeConnector(first_socket)), FixedStrategy(4))
    second = GameSession(GameConnection("ws://host", connect=FakeConnector(second_socket)), FixedStrategy(2))

    async def scenario():
        return await asyncio.gather(first.play("T1"), second.play("T2"))

    first_result, second_result = asyncio.run(scenario())

    assert first_result.phase is GamePhase.ENDED
    assert first_result.score == 10
    assert second_result.phase is GamePhase.ANSWER_ACKNOWLEDGED
    assert second_result.score is None
    assert first.interpreter.history == [
        GamePhase.AWAITING_GAME,
        GamePhase.AWAITING_QUESTION,
        GamePhase.QUESTION_ACTIVE,
        GamePhase.ENDED,
    ]
    assert second.interpreter.history == [
        GamePhase.NO_GAME_AVAILABLE,
        GamePhase.AWAITING_GAME,
        GamePhase.QUESTION_ACTIVE,
        GamePhase.ANSWER_ACKNOWLEDGED,
    ]
    assert first_socket.sent == ['{"type":"Answer","answer_idx":"Four"}']
    assert second_socket.sent == ['{"type":"Answer","answer_idx":"Two"}']


def test_participant_names() -> None:
    assert participant_names("bot", 1) == ["bot"]
    assert participant_names("bot", 3) == ["bot-1", "bot-2", "bot-3"]
    with pytest.raises(ValueError):
        participant_names("bot", 0)


def test_swarm_registers_and_plays_each_participant(tmp_path) -> None:
    connector = FakeConnector({"/game/tok-bot-1": ScriptedSocket(STREAM_ONE), "/game/tok-bot-2": ScriptedSocket(STREAM_TWO)})
    registered: list[tuple[str, str]] = []

    def _token_provider(username: str, password: str) -> str:
        registered.append((username, password))
        return f"tok-{username}"

    swarm = Swarm(
        ClientConfig(http_url="http://host:3030", event_log_dir=tmp_path),
        token_provider=_token_provider,
        connect=connector,
    )
    summary = asyncio.run(
        swarm.run(["bot-1", "bot-2"], lambda name: ScriptedStrategy(strategy_id=name, positions=[1]), password="pw")
    )

    assert sorted(registered) == [("bot-1", "pw"), ("bot-2", "pw")]
    assert sorted(url for url, _ in connector.calls) == ["ws://host:3030/game/tok-bot-1", "ws://host:3030/game/tok-bot-2"]
    assert summary.ok
    assert summary.scores == {"bot-1": 10, "bot-2": None}
    assert summary.phase_counts == {"Ended": 1, "AnswerAcknowledged": 1}
    assert (tmp_path / "bot-1.jsonl").exists()
    assert summary.to_dict()["ok"] is True


def test_swarm_captures_failures_without_cancelling_siblings() -> None:
    connector = FakeConnector({"/game/good": ScriptedSocket(STREAM_ONE)})

    def _token_provider(username: str, password: str) -> str:
        if username == "bad":
            raise RegistrationError("register failed: requested username already exists")
        return "good"

    swarm = Swarm(ClientConfig(), token_provider=_token_provider, connect=connector)
    summary = asyncio.run(swarm.run(["good", "bad"], lambda name: FixedStrategy(1)))

    assert [result.session_id for result in summary.results] == ["good"]
    assert summary.failures[0]["participant"] == "bad"
    assert summary.failures[0]["error"]["type"] == "RegistrationError"
    assert not summary.ok


def test_swarm_uses_given_tokens_and_reports_connection_failures() -> None:
    connector = FakeConnector(error=ConnectionRefusedError("refused"))
    swarm = Swarm(ClientConfig(ws_url="ws://game"), token_provider=lambda u, p: pytest.fail("should not register"), connect=connector)

    summary = asyncio.run(swarm.run(["solo"], lambda name: FixedStrategy(1), tokens=["abc"]))

    assert connector.calls[0][0] == "ws://game/game/abc"
    assert summary.results == []
    assert summary.failures[0]["error"]["type"] == "GameConnectionError"


def test_swarm_rejects_mismatched_tokens() -> None:
    swarm = Swarm(ClientConfig(), connect=FakeConnector(ScriptedSocket([])))
    with pytest.raises(ValueError):
        asyncio.run(swarm.run(["a", "b"], lambda name: FixedStrategy(1), tokens=["only-one"]))


def test_unexpected_crash_is_recorded_and_siblings_still_finish() -> None:
    connector = FakeConnector(
        {
            "/game/good": ScriptedSocket(STREAM_ONE),
            "/game/bad": ScriptedSocket(['{"type":"GameStart"}'], fail_with=RuntimeError("frame reader crashed")),
        }
    )
    swarm = Swarm(ClientConfig(), token_provider=lambda username, password: username, connect=connector)

    summary = asyncio.run(swarm.run(["good", "bad"], lambda name: FixedStrategy(1)))

    assert [result.session_id for result in summary.results] == ["good"]
    assert summary.results[0].phase is GamePhase.ENDED
    failure = summary.failures[0]
    assert failure["participant"] == "bad"
    assert failure["error"] == {"type": "RuntimeError", "message": "frame reader crashed"}
    assert failure["result"]["phase"] == "AwaitingQuestion"
    assert failure["result"]["termination"] == "error"
    assert not summary.ok


def test_oversized_frame_is_skipped_without_ending_the_session() -> None:
    oversized = '{"type":"GameEnd","score":' + "1" * 5000 + "}"
    connector = FakeConnector(
        {
            "/game/good": ScriptedSocket(STREAM_ONE),
            "/game/bad": ScriptedSocket([oversized, '{"type":"GameEnd","score":3}']),
        }
    )
    swarm = Swarm(ClientConfig(), token_provider=lambda username, password: username, connect=connector)

    summary = asyncio.run(swarm.run(["good", "bad"], lambda name: FixedStrategy(1)))

    assert summary.ok
    assert summary.scores == {"good": 10, "bad": 3}
    assert summary.results[1].decode_errors == 1
