from __future__ import annotations

"""
Token Estimation Engine.

Computes the packing weight of extracted content. The default strategy is
the word/character heuristic, kept bit-for-bit stable so partition
boundaries are reproducible. A tiktoken-backed strategy can replace it;
when that strategy fails the heuristic result is used instead.
"""

import logging
from typing import Dict, Optional

from slnpack.core.processing.strategies import (
    HeuristicStrategy,
    TiktokenStrategy,
    TokenizerStrategy,
)
from slnpack.domain.constants import DEFAULT_TOKENIZER

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# SERVICE ORCHESTRATION (FACADE)
# -----------------------------------------------------------------------------

class TokenizerService:
    """
    Routes weight estimation to the configured strategy.
    """

    def __init__(self, strategy_name: str = DEFAULT_TOKENIZER) -> None:
        self.heuristic = HeuristicStrategy()
        self._strategies: Dict[str, TokenizerStrategy] = {
            HeuristicStrategy.name: self.heuristic,
            TiktokenStrategy.name: TiktokenStrategy(),
        }
        self.strategy = self._resolve(strategy_name)
        self._fallback_warned = False

    def count(self, text: Optional[str]) -> int:
        """
        Estimate the weight of `text`.

        Args:
            text: Content to measure; None counts as empty.

        Returns:
            int: Non-negative weight.
        """
        if not text:
            return 0

        if self.strategy is self.heuristic:
            return self.heuristic.count(text)

        try:
            return self.strategy.count(text)
        except Exception as e:
            if not self._fallback_warned:
                logger.warning(
                    f"Strategy {type(self.strategy).__name__} failed: {e}. Using heuristic fallback."
                )
                self._fallback_warned = True
            return self.heuristic.count(text)

    def _resolve(self, strategy_name: str) -> TokenizerStrategy:
        key = (strategy_name or DEFAULT_TOKENIZER).strip().lower()
        strategy = self._strategies.get(key)
        if strategy is None:
            logger.warning(f"Unknown tokenizer '{strategy_name}'. Using {DEFAULT_TOKENIZER}.")
            return self.heuristic
        return strategy

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

_HEURISTIC = HeuristicStrategy()


def estimate_tokens(text: Optional[str]) -> int:
    """
    Default packing weight: max(word count, character count // 5).

    This is a heuristic, not a tokenizer. It is deterministic and monotonic
    in content length, which is all partitioning needs.

    Args:
        text: Content to measure.

    Returns:
        int: Non-negative weight.
    """
    return _HEURISTIC.count(text or "")
