"""Structured exceptions used across the trivia client."""

from __future__ import annotations

from typing import Any


class TriviaClientError(Exception):
    """Base class for client-level exceptions."""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {"type": self.__class__.__name__, "message": str(self)}


def error_payload(error: Exception) -> dict[str, Any]:
    """JSON-serializable description of any exception raised during play."""
    if isinstance(error, TriviaClientError):
        return error.to_dict()
    return {"type": type(error).__name__, "message": str(error)}


class GameConnectionError(TriviaClientError):
    """Raised when the websocket cannot be established or is lost abnormally."""

    def __init__(self, url: str | None, message: str):
        self.url = url
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["url"] = self.url
        return payload


class NotConnectedError(TriviaClientError):
    """Raised when sending before the connection is open or after it closed."""


class SendError(TriviaClientError):
    """Raised when the transport rejects an outbound frame."""


class DecodeError(TriviaClientError):
    """Raised when an inbound frame does not match any known message shape."""

    def __init__(self, payload: str | bytes, reason: str):
        self.payload = payload
        self.reason = reason
        super().__init__(f"Undecodable frame: {reason}")

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        raw = self.payload
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        payload.update({"reason": self.reason, "payload": raw})
        return payload


class AnswerSelectionError(TriviaClientError):
    """Raised when a strategy cannot produce a valid answer position."""

    def __init__(self, strategy_id: str, choice: Any, reason: str | None = None):
        self.strategy_id = strategy_id
        self.choice = choice
        self.reason = reason
        message = f"Invalid answer from {strategy_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update({"strategy_id": self.strategy_id, "choice": self.choice})
        if self.reason is not None:
            payload["reason"] = self.reason
        return payload


class RegistrationError(TriviaClientError):
    """Raised when registration or login does not yield a token."""
