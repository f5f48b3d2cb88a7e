"""Command-line entry point for playing one or many participants."""

from __future__ import annotations

import argparse
import asyncio
import logging
from functools import partial
from pathlib import Path
from typing import Sequence

from .config import ClientConfig
from .registration import login, register
from .serialize import json_dumps
from .strategies.factory import create_strategy
from .swarm import Swarm, participant_names


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play the trivia game with one or more participants.")
    parser.add_argument("--server", type=str, default=None, help="HTTP base URL (default: TRIVIA_HTTP_URL).")
    parser.add_argument("--ws-server", type=str, default=None, help="Websocket base URL (default: derived).")
    parser.add_argument("--username", type=str, default="player")
    parser.add_argument("--password", type=str, default=None)
    parser.add_argument("--login", action="store_true", help="Log in instead of registering.")
    parser.add_argument("--token", type=str, default=None, help="Use an existing token and skip registration.")
    parser.add_argument("--players", type=int, default=1)
    parser.add_argument("--strategy", type=str, default="fixed:1")
    parser.add_argument("--prime", action="store_true", help="Send an answer as soon as the socket opens.")
    parser.add_argument("--log-dir", type=str, default=None)
    parser.add_argument("--output", type=str, default=None)
    parser.add_argument("--log-level", type=str, default=None)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint; returns 0 when every session ended cleanly."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.players < 1:
        parser.error("--players must be at least 1")
    if args.token and args.players != 1:
        parser.error("--token can only be used with a single player")
    if not args.token and not args.password:
        parser.error("--password is required unless --token is given")

    config = ClientConfig.from_env().with_overrides(
        http_url=args.server,
        ws_url=args.ws_server,
        event_log_dir=args.log_dir,
        log_level=args.log_level.upper() if args.log_level else None,
        prime_on_open=True if args.prime else None,
    )
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    request_token = login if args.login else register
    swarm = Swarm(
        config,
        token_provider=partial(request_token, config.http_url, timeout_sec=config.http_timeout_sec),
    )
    usernames = participant_names(args.username, args.players)
    summary = asyncio.run(
        swarm.run(
            usernames,
            lambda participant: create_strategy(args.strategy, participant=participant),
            password=args.password or "",
            tokens=[args.token] if args.token else None,
        )
    )

    summary_dict = summary.to_dict()
    print(json_dumps(summary_dict, indent=2))
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json_dumps(summary_dict, indent=2), encoding="utf-8")
    return 0 if summary.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
