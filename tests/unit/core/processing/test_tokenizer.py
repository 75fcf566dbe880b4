from __future__ import annotations

"""
Unit tests for Token Estimation.

Verifies:
1. Delegation to the primary (tiktoken) strategy.
2. Fallback to the character heuristic on failure.
3. Handling of empty inputs and the module-level helper.
"""

from unittest.mock import MagicMock, patch

import pytest

from scanex.core.processing.tokenizer import (
    LEGACY_ENCODING,
    HeuristicStrategy,
    TiktokenStrategy,
    TokenCounter,
    count_tokens,
)


@pytest.fixture
def counter() -> TokenCounter:
    """Counter whose primary strategy is a mock."""
    primary = MagicMock()
    primary.count.return_value = 42
    return TokenCounter(primary=primary)


def test_counter_delegates_to_primary(counter: TokenCounter) -> None:
    """TC-01: Verify that the primary strategy answers when it works."""
    assert counter.count("some text") == 42
    counter.primary.count.assert_called_once_with("some text")


def test_counter_falls_back_on_failure(counter: TokenCounter) -> None:
    """TC-02: Verify that a failing encoder degrades to the heuristic."""
    counter.primary.count.side_effect = RuntimeError("cache miss")

    # 8 chars -> 2 tokens
    assert counter.count("12345678") == 2


def test_counter_empty_input(counter: TokenCounter) -> None:
    assert counter.count("") == 0
    counter.primary.count.assert_not_called()


def test_heuristic_rounds_up() -> None:
    strategy = HeuristicStrategy()
    assert strategy.count("") == 0
    assert strategy.count("abc") == 1
    assert strategy.count("abcde") == 2


def test_tiktoken_strategy_falls_back_to_legacy_encoding() -> None:
    """TC-03: Verify that an unknown encoding name loads the legacy encoding."""
    encoding = MagicMock()
    encoding.encode.return_value = [1, 2, 3]

    def fake_get_encoding(name: str):
        if name != LEGACY_ENCODING:
            raise ValueError(name)
        return encoding

    with patch("scanex.core.processing.tokenizer.tiktoken.get_encoding", side_effect=fake_get_encoding):
        strategy = TiktokenStrategy("no-such-encoding")
        assert strategy.count("hello") == 3
        assert strategy.count("again") == 3

    encoding.encode.assert_called_with("again", disallowed_special=())


def test_public_count_tokens_interface() -> None:
    """Verify that the module helper delegates to the shared counter."""
    with patch("scanex.core.processing.tokenizer._COUNTER.count", return_value=99) as mock_count:
        assert count_tokens("hello world") == 99
        mock_count.assert_called_once_with("hello world")
