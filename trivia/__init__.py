"""Trivia game client: wire messages, phase tracking, connections and sessions."""

from .config import ClientConfig
from .connection import ConnectionListener, ConnectionState, GameConnection, build_game_url
from .errors import (
    AnswerSelectionError,
    DecodeError,
    GameConnectionError,
    NotConnectedError,
    RegistrationError,
    SendError,
    TriviaClientError,
)
from .interpreter import MessageInterpreter
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
    encode_message,
)
from .phase import GamePhase, PhaseState
from .registration import login, register
from .session import GameSession, SessionResult
from .swarm import Swarm, SwarmSummary

__all__ = [
    "AnswerAck",
    "AnswerIndex",
    "AnswerSelectionError",
    "AnswerSubmission",
    "ClientConfig",
    "ConnectionListener",
    "ConnectionState",
    "DecodeError",
    "GameConnection",
    "GameConnectionError",
    "GameEnd",
    "GamePhase",
    "GameSession",
    "GameStart",
    "InboundMessage",
    "MessageInterpreter",
    "NoGame",
    "NotConnectedError",
    "PhaseState",
    "Question",
    "RegistrationError",
    "SendError",
    "SessionResult",
    "Swarm",
    "SwarmSummary",
    "TimeTillGame",
    "TriviaClientError",
    "build_game_url",
    "decode_message",
    "encode_message",
    "login",
    "register",
]
