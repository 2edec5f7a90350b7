from __future__ import annotations

"""
Tiktoken Estimation Strategy.

Counts tokens with a real BPE encoding from the tiktoken library. Offered as
the replaceable alternative to the heuristic weight; partition boundaries
then follow the chosen encoding instead of the word/character estimate.
"""

import logging

from slnpack.core.processing.strategies.base import TokenizerStrategy

logger = logging.getLogger(__name__)

TIKTOKEN_AVAILABLE = False
try:
    import tiktoken
    TIKTOKEN_AVAILABLE = True
except ImportError:
    pass

DEFAULT_ENCODING_NAME = "o200k_base"
FALLBACK_ENCODING_NAME = "cl100k_base"


class TiktokenStrategy(TokenizerStrategy):
    """
    BPE token counter backed by tiktoken.
    """

    name = "tiktoken"

    def __init__(self, encoding_name: str = DEFAULT_ENCODING_NAME) -> None:
        self._encoding_name = encoding_name
        self._encoding = None

    def count(self, text: str) -> int:
        """
        Encode `text` and count the resulting tokens.

        Raises:
            ImportError: If tiktoken is not installed.
        """
        if not TIKTOKEN_AVAILABLE:
            raise ImportError("Library 'tiktoken' is not installed.")

        if self._encoding is None:
            try:
                self._encoding = tiktoken.get_encoding(self._encoding_name)
            except ValueError:
                logger.debug(f"Encoding '{self._encoding_name}' not found, falling back to {FALLBACK_ENCODING_NAME}.")
                self._encoding = tiktoken.get_encoding(FALLBACK_ENCODING_NAME)

        return len(self._encoding.encode(text, disallowed_special=()))
