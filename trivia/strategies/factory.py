"""Factory for building answer strategies from CLI or config specs."""

from __future__ import annotations

from typing import Any

from .base import AnswerStrategy
from .fixed_strategy import FixedStrategy
from .human_cli_strategy import HumanCLIStrategy
from .keyword_strategy import KeywordStrategy
from .random_strategy import RandomStrategy

SUPPORTED_KINDS = ("fixed", "random", "keyword", "human")


def normalize_strategy_config(raw: Any) -> dict[str, Any]:
    """
    Normalize a strategy spec into a typed dictionary.

    Strings use ``kind[:argument]``, e.g. ``fixed:2``, ``random:7``,
    ``keyword:paris,blue`` or ``human``.
    """
    if isinstance(raw, str):
        kind, _, argument = raw.strip().partition(":")
        config: dict[str, Any] = {"type": kind.strip().lower() or "fixed"}
        argument = argument.strip()
        if argument:
            config["argument"] = argument
        return config
    if isinstance(raw, dict):
        data = dict(raw)
        data["type"] = str(data.get("type", "fixed")).strip().lower()
        return data
    return {"type": "fixed"}


def create_strategy(raw: Any, *, participant: str = "player") -> AnswerStrategy:
    """Instantiate a concrete strategy for one participant."""
    config = normalize_strategy_config(raw)
    kind = config["type"]
    argument = config.get("argument")
    label = participant.lower()

    if kind == "fixed":
        position = int(config.get("position", argument or 1))
        return FixedStrategy(position=position, strategy_id=f"fixed-{label}")

    if kind == "random":
        seed = config.get("seed", argument)
        return RandomStrategy(strategy_id=f"random-{label}", seed=int(seed) if seed is not None else None)

    if kind == "keyword":
        keywords = config.get("keywords")
        if keywords is None:
            keywords = [item for item in str(argument or "").split(",")]
        return KeywordStrategy(keywords=list(keywords), strategy_id=f"keyword-{label}")

    if kind == "human":
        return HumanCLIStrategy(strategy_id=f"human-{label}")

    raise ValueError(
        f"Unsupported strategy type '{kind}'. "
        f"Supported types: {', '.join(SUPPORTED_KINDS)}."
    )
