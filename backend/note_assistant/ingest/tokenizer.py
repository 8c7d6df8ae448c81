"""Token counting capability."""

from __future__ import annotations

from typing import Protocol


class Tokenizer(Protocol):
    def count_tokens(self, text: str) -> int: ...


class WhitespaceTokenizer:
    """Counts whitespace-separated words; punctuation stays attached to its word."""

    def count_tokens(self, text: str) -> int:
        return len(text.split())


__all__ = ["Tokenizer", "WhitespaceTokenizer"]
