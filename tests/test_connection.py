"""Tests for the websocket connection manager."""

from __future__ import annotations

import asyncio

import pytest
from websockets.exceptions import InvalidURI

from trivia.connection import ConnectionState, GameConnection, build_game_url
from trivia.errors import GameConnectionError, NotConnectedError, SendError
from trivia.messages import AnswerIndex, AnswerSubmission
from ws_fakes import FakeConnector, RecordingListener, ScriptedSocket

ANSWER = AnswerSubmission(answer_idx=AnswerIndex.ONE)


def test_build_game_url_embeds_quoted_token() -> None:
    assert build_game_url("ws://localhost:3030/", "abc") == "ws://localhost:3030/game/abc"
    assert build_game_url("ws://host", "a b/c") == "ws://host/game/a%20b%2Fc"
    assert build_game_url("ws://host", "t", "play/{token}/ws") == "ws://host/play/t/ws"


def test_empty_token_is_rejected() -> None:
    connection = GameConnection("ws://host", connect=FakeConnector(ScriptedSocket([])))
    with pytest.raises(GameConnectionError):
        asyncio.run(connection.open(""))
    assert connection.state is ConnectionState.CLOSED


def test_open_passes_url_and_timeout_to_transport() -> None:
    connector = FakeConnector(ScriptedSocket([]))
    connection = GameConnection("ws://host", connect=connector, open_timeout_sec=3.0)

    asyncio.run(connection.open("tok"))

    assert connection.is_open
    assert connector.calls == [("ws://host/game/tok", {"open_timeout": 3.0})]


@pytest.mark.parametrize("error", [ConnectionRefusedError("refused"), TimeoutError(), InvalidURI("bad", "nope")])
def test_transport_failure_on_open_raises_connection_error(error: BaseException) -> None:
    connection = GameConnection("ws://host", connect=FakeConnector(error=error))

    with pytest.raises(GameConnectionError) as info:
        asyncio.run(connection.open("tok"))

    assert info.value.url == "ws://host/game/tok"
    assert connection.state is ConnectionState.CLOSED


def test_open_twice_is_rejected() -> None:
    connection = GameConnection("ws://host", connect=FakeConnector(ScriptedSocket([])))

    async def scenario() -> None:
        await connection.open("tok")
        await connection.open("tok")

    with pytest.raises(GameConnectionError):
        asyncio.run(scenario())


def test_send_before_open_fails_without_transmitting() -> None:
    socket = ScriptedSocket([])
    connection = GameConnection("ws://host", connect=FakeConnector(socket))

    with pytest.raises(NotConnectedError):
        asyncio.run(connection.send(ANSWER))
    assert socket.sent == []


def test_send_after_close_fails_without_transmitting() -> None:
    socket = ScriptedSocket(['{"type":"GameEnd","score":1}'])
    connection = GameConnection("ws://host", connect=FakeConnector(socket))
    listener = RecordingListener()

    async def scenario() -> None:
        await connection.open("tok")
        await connection.serve(listener)
        await connection.send(ANSWER)

    with pytest.raises(NotConnectedError):
        asyncio.run(scenario())
    assert socket.sent == []
    assert listener.calls[-1] == ("close", None)


def test_close_is_idempotent() -> None:
    socket = ScriptedSocket([])
    connection = GameConnection("ws://host", connect=FakeConnector(socket))

    async def scenario() -> None:
        await connection.open("tok")
        await connection.close()
        await connection.close()

    asyncio.run(scenario())
    assert socket.closed
    assert connection.state is ConnectionState.CLOSED


def test_send_after_error_fails_without_transmitting() -> None:
    socket = ScriptedSocket(['{"type":"GameStart"}'], fail_with=ConnectionResetError("reset"))
    connection = GameConnection("ws://host", connect=FakeConnector(socket))
    listener = RecordingListener()

    async def scenario() -> None:
        await connection.open("tok")
        await connection.serve(listener)
        await connection.send(ANSWER)

    with pytest.raises(NotConnectedError):
        asyncio.run(scenario())
    assert socket.sent == []


def test_serve_delivers_events_in_order() -> None:
    frames = ['{"type":"TimeTillGame","time":3}', '{"type":"GameStart"}', b'{"type":"NoGame"}']
    connection = GameConnection("ws://host", connect=FakeConnector(ScriptedSocket(frames)))
    listener = RecordingListener()

    async def scenario() -> None:
        await connection.open("tok")
        await connection.serve(listener)

    asyncio.run(scenario())

    assert listener.calls == [
        ("open", None),
        ("message", frames[0]),
        ("message", frames[1]),
        ("message", frames[2]),
        ("close", None),
    ]
    assert connection.state is ConnectionState.CLOSED


def test_abnormal_termination_reports_error_once_and_no_close() -> None:
    socket = ScriptedSocket(['{"type":"GameStart"}'], fail_with=ConnectionResetError("reset"))
    connection = GameConnection("ws://host", connect=FakeConnector(socket))
    listener = RecordingListener()

    async def scenario() -> None:
        await connection.open("tok")
        await connection.serve(listener)

    asyncio.run(scenario())

    kinds = [kind for kind, _ in listener.calls]
    assert kinds == ["open", "message", "error"]
    assert isinstance(listener.calls[-1][1], GameConnectionError)
    assert socket.closed


def test_serve_requires_open_connection() -> None:
    connection = GameConnection("ws://host", connect=FakeConnector(ScriptedSocket([])))
    with pytest.raises(NotConnectedError):
        asyncio.run(connection.serve(RecordingListener()))


def test_rejected_frame_raises_send_error() -> None:
    socket = ScriptedSocket([], reject_sends=True)
    connection = GameConnection("ws://host", connect=FakeConnector(socket))

    async def scenario() -> None:
        await connection.open("tok")
        await connection.send(ANSWER)

    with pytest.raises(SendError):
        asyncio.run(scenario())


def test_send_serializes_answer_frame() -> None:
    socket = ScriptedSocket([])
    connection = GameConnection("ws://host", connect=FakeConnector(socket))

    async def scenario() -> None:
        await connection.open("tok")
        await connection.send(AnswerSubmission(answer_idx=AnswerIndex.FOUR))
        await connection.close()
        await connection.close()

    asyncio.run(scenario())
    assert socket.sent == ['{"type":"Answer","answer_idx":"Four"}']
    assert connection.state is ConnectionState.CLOSED
