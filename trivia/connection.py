"""Websocket connection manager for one participant session.

`GameConnection` owns the transport only: it opens the socket for a token,
forwards raw frames to a `ConnectionListener` in arrival order and serializes
outbound messages. It never looks inside inbound frames.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Protocol
from urllib.parse import quote

from websockets.asyncio.client import connect as websockets_connect
from websockets.exceptions import ConnectionClosedError, WebSocketException

from .errors import GameConnectionError, NotConnectedError, SendError
from .messages import OutboundMessage, encode_message

logger = logging.getLogger(__name__)

DEFAULT_GAME_PATH = "/game/{token}"

Connector = Callable[..., Awaitable[Any]]


class ConnectionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class ConnectionListener(Protocol):
    """Receiver of connection lifecycle events."""

    async def on_open(self) -> None:
        """Called once after the handshake completes."""

    async def on_message(self, payload: str | bytes) -> None:
        """Called once per inbound frame, in arrival order."""

    async def on_close(self) -> None:
        """Called once when the stream ends gracefully."""

    async def on_error(self, error: GameConnectionError) -> None:
        """Called once when the stream ends abnormally; implies close."""


def build_game_url(server_url: str, token: str, path_template: str = DEFAULT_GAME_PATH) -> str:
    """Embed ``token`` into the game path under ``server_url``."""
    if not isinstance(token, str) or not token.strip():
        raise GameConnectionError(None, "Session token must be a non-empty string.")
    path = path_template.format(token=quote(token, safe=""))
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{server_url.rstrip('/')}{path}"


class GameConnection:
    """One duplex websocket session keyed by a token."""

    def __init__(
        self,
        server_url: str,
        *,
        path_template: str = DEFAULT_GAME_PATH,
        open_timeout_sec: float | None = 10.0,
        connect: Connector | None = None,
    ):
        self.server_url = server_url
        self.path_template = path_template
        self.open_timeout_sec = open_timeout_sec
        self._connect = connect or websockets_connect
        self._socket: Any = None
        self.state = ConnectionState.IDLE
        self.url: str | None = None

    @property
    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    async def open(self, token: str) -> None:
        """Establish the websocket for ``token``; raises `GameConnectionError` on failure."""
        if self.state is not ConnectionState.IDLE:
            raise GameConnectionError(self.url, f"Connection already {self.state.value}; use a new GameConnection.")
        try:
            url = build_game_url(self.server_url, token, self.path_template)
        except GameConnectionError:
            self.state = ConnectionState.CLOSED
            raise

        self.url = url
        self.state = ConnectionState.CONNECTING
        try:
            self._socket = await self._connect(url, open_timeout=self.open_timeout_sec)
        except (OSError, WebSocketException) as exc:
            self.state = ConnectionState.CLOSED
            logger.error("Could not connect to %s: %s", url, exc)
            raise GameConnectionError(url, f"Could not connect to {url}: {exc}") from exc

        self.state = ConnectionState.OPEN
        logger.info("Connected to %s", url)

    async def serve(self, listener: ConnectionListener) -> None:
        """Deliver lifecycle events to ``listener`` until the stream ends."""
        if self.state is not ConnectionState.OPEN:
            raise NotConnectedError(f"Cannot serve a connection that is {self.state.value}.")

        frames = aiter(self._socket)
        try:
            await listener.on_open()
            while True:
                try:
                    payload = await anext(frames)
                except StopAsyncIteration:
                    break
                except (ConnectionClosedError, OSError) as exc:
                    error = GameConnectionError(self.url, f"Connection lost: {exc}")
                    logger.error("Connection to %s lost: %s", self.url, exc)
                    await self.close()
                    await listener.on_error(error)
                    return
                await listener.on_message(payload)
        except BaseException:
            await self.close()
            raise

        await self.close()
        logger.info("Connection to %s closed", self.url)
        await listener.on_close()

    async def send(self, message: OutboundMessage) -> None:
        """Serialize and transmit one outbound message."""
        if self.state is not ConnectionState.OPEN or self._socket is None:
            raise NotConnectedError(f"Cannot send {message.type} frame: connection is {self.state.value}.")
        frame = encode_message(message)
        try:
            await self._socket.send(frame)
        except (WebSocketException, OSError) as exc:
            raise SendError(f"Transport rejected {message.type} frame: {exc}") from exc
        logger.debug("Sent %s", frame)

    async def close(self) -> None:
        """Close the socket; safe to call more than once."""
        if self.state is ConnectionState.CLOSED:
            return
        self.state = ConnectionState.CLOSED
        if self._socket is not None:
            await self._socket.close()
