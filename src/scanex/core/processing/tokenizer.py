from __future__ import annotations

"""
Token Estimation.

Counts the tokens a rendered bundle would occupy in an LLM context using
tiktoken's BPE encodings. When an encoding cannot be loaded (offline
cache miss, unknown name) the character-density heuristic is used
instead so statistics are always available.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Optional

import tiktoken

logger = logging.getLogger(__name__)

# Approximately 4 characters per token for code and prose
CHARS_PER_TOKEN_AVG: int = 4

DEFAULT_ENCODING: str = "o200k_base"
LEGACY_ENCODING: str = "cl100k_base"

# -----------------------------------------------------------------------------
# STRATEGIES
# -----------------------------------------------------------------------------

class TokenizerStrategy(ABC):
    """Abstract token counting algorithm."""

    @abstractmethod
    def count(self, text: str) -> int:
        """
        Calculate the token count for a text segment.

        Args:
            text: Input string to be measured.

        Returns:
            int: Total token count.
        """
        pass


class HeuristicStrategy(TokenizerStrategy):
    """Fallback estimation from character density."""

    def count(self, text: str) -> int:
        if not text:
            return 0
        return math.ceil(len(text) / CHARS_PER_TOKEN_AVG)


class TiktokenStrategy(TokenizerStrategy):
    """
    Local BPE encoder backed by tiktoken.

    The encoding is loaded lazily on first use and cached on the instance.
    """

    def __init__(self, encoding_name: str = DEFAULT_ENCODING) -> None:
        self.encoding_name = encoding_name
        self._encoding: Optional[tiktoken.Encoding] = None

    def _load(self) -> tiktoken.Encoding:
        if self._encoding is None:
            try:
                self._encoding = tiktoken.get_encoding(self.encoding_name)
            except ValueError:
                logger.debug(f"Encoding '{self.encoding_name}' not found, falling back to {LEGACY_ENCODING}.")
                self._encoding = tiktoken.get_encoding(LEGACY_ENCODING)
        return self._encoding

    def count(self, text: str) -> int:
        if not text:
            return 0
        return len(self._load().encode(text, disallowed_special=()))

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

class TokenCounter:
    """
    Token counter with graceful degradation.

    Tries the primary strategy and, on any failure, logs a warning and
    answers with the heuristic estimate instead.
    """

    def __init__(self, primary: Optional[TokenizerStrategy] = None) -> None:
        self.primary = primary or TiktokenStrategy()
        self.heuristic = HeuristicStrategy()

    def count(self, text: str) -> int:
        if not text:
            return 0
        try:
            return self.primary.count(text)
        except Exception as e:
            logger.warning(f"{type(self.primary).__name__} failed: {e}. Using heuristic estimate.")
            return self.heuristic.count(text)


_COUNTER = TokenCounter()


def count_tokens(text: str) -> int:
    """
    Estimate the number of tokens of text.

    Args:
        text: Input string content.

    Returns:
        int: Token count (exact when tiktoken is usable, else estimated).
    """
    return _COUNTER.count(text)
