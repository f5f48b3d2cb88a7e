"""Registration and login calls that produce a session token."""

from __future__ import annotations

import json
import logging
from typing import Any

from .errors import RegistrationError
from .http_utils import HTTPStatusError, post_json

logger = logging.getLogger(__name__)


def _server_message(detail: str) -> str:
    try:
        body = json.loads(detail)
    except json.JSONDecodeError:
        return detail.strip()
    if isinstance(body, dict):
        for key in ("message", "error", "status"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return detail.strip()


def _request_token(endpoint: str, base_url: str, username: str, password: str, timeout_sec: float) -> str:
    if not username:
        raise RegistrationError("username is empty")
    if not password:
        raise RegistrationError("password is empty")

    url = f"{base_url.rstrip('/')}/{endpoint}"
    try:
        response: dict[str, Any] = post_json(
            url=url,
            payload={"username": username, "password": password},
            headers={},
            timeout_sec=timeout_sec,
        )
    except HTTPStatusError as exc:
        raise RegistrationError(f"{endpoint} failed ({exc.status}): {_server_message(exc.detail)}") from exc
    except (RuntimeError, ValueError) as exc:
        raise RegistrationError(f"{endpoint} failed: {exc}") from exc

    status = response.get("status")
    if status != "OK":
        reason = response.get("message") or response.get("error") or status
        raise RegistrationError(f"{endpoint} failed: {reason}")
    token = response.get("token")
    if not isinstance(token, str) or not token:
        raise RegistrationError(f"{endpoint} response did not include a token")
    logger.info("Obtained token for %s via /%s", username, endpoint)
    return token


def register(base_url: str, username: str, password: str, *, timeout_sec: float = 15.0) -> str:
    """Create an account and return its session token."""
    return _request_token("register", base_url, username, password, timeout_sec)


def login(base_url: str, username: str, password: str, *, timeout_sec: float = 15.0) -> str:
    """Log in to an existing account and return a session token."""
    return _request_token("login", base_url, username, password, timeout_sec)
