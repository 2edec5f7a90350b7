from __future__ import annotations

"""
Word/Character Heuristic Strategy.

The default packing weight. It is not a tokenizer: it only has to be
deterministic and grow with the content, and it is kept stable so that the
same tree always splits into the same partitions.
"""

import re

from slnpack.core.processing.strategies.base import TokenizerStrategy

CHARS_PER_TOKEN: int = 5

# Space, tab, CR and LF separate words; other Unicode whitespace does not
_WORD_SEPARATORS = re.compile(r"[ \t\r\n]+")


class HeuristicStrategy(TokenizerStrategy):
    """
    Estimate tokens as max(words, characters // 5).
    """

    name = "heuristic"

    def count(self, text: str) -> int:
        if not text:
            return 0
        words = sum(1 for w in _WORD_SEPARATORS.split(text) if w)
        return max(words, len(text) // CHARS_PER_TOKEN)
