from __future__ import annotations

"""
Base Definitions for Token Estimation Strategies.

Provides the abstract interface shared by every weight estimator used to
pack extracted files into bounded partitions.
"""

from abc import ABC, abstractmethod


class TokenizerStrategy(ABC):
    """
    Abstract base class for token estimation algorithms.
    """

    name: str = ""

    @abstractmethod
    def count(self, text: str) -> int:
        """
        Estimate the token count of a text segment.

        Args:
            text: Input string to be measured.

        Returns:
            int: Non-negative token estimate.
        """
        pass
