"""Answer strategy implementations."""

from .base import AnswerStrategy, selectable_count
from .factory import create_strategy, normalize_strategy_config
from .fixed_strategy import FixedStrategy
from .human_cli_strategy import HumanCLIStrategy
from .keyword_strategy import KeywordStrategy
from .random_strategy import RandomStrategy
from .scripted_strategy import ScriptedStrategy

__all__ = [
    "AnswerStrategy",
    "FixedStrategy",
    "HumanCLIStrategy",
    "KeywordStrategy",
    "RandomStrategy",
    "ScriptedStrategy",
    "create_strategy",
    "normalize_strategy_config",
    "selectable_count",
]
