from __future__ import annotations

from .base import TokenizerStrategy
from .heuristic import CHARS_PER_TOKEN, HeuristicStrategy
from .openai import TIKTOKEN_AVAILABLE, TiktokenStrategy

__all__ = [
    "TokenizerStrategy",
    "HeuristicStrategy",
    "CHARS_PER_TOKEN",
    "TiktokenStrategy",
    "TIKTOKEN_AVAILABLE",
]
