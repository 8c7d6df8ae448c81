"""Context window packing."""

from __future__ import annotations

from typing import Sequence

from note_assistant.core.errors import NoIndexError
from note_assistant.ingest.tokenizer import Tokenizer, WhitespaceTokenizer
from note_assistant.ingest.types import SearchIndex
from note_assistant.retrieval.similarity import rank_chunks

CONTEXT_SEPARATOR = "\n\n###\n\n"
CHUNK_OVERHEAD_TOKENS = 4


def select_context(
    question_vector: Sequence[float],
    index: SearchIndex,
    max_tokens: int = 1800,
    tokenizer: Tokenizer | None = None,
) -> list[str]:
    """Pick the best-ranked chunk texts that fit in ``max_tokens``.

    Each chunk costs its own token count plus a fixed separator overhead. The
    walk stops at the first chunk that no longer fits; lower-ranked chunks are
    not considered even if they are smaller.
    """
    if index.is_empty:
        raise NoIndexError()
    counter = tokenizer or WhitespaceTokenizer()
    selected: list[str] = []
    total = 0
    for chunk in rank_chunks(question_vector, index.chunks):
        total += counter.count_tokens(chunk.text) + CHUNK_OVERHEAD_TOKENS
        if total > max_tokens:
            break
        selected.append(chunk.text)
    if not selected:
        raise NoIndexError("No indexed passage fits within the context budget.")
    return selected


def build_context(
    question_vector: Sequence[float],
    index: SearchIndex,
    max_tokens: int = 1800,
    tokenizer: Tokenizer | None = None,
) -> str:
    """Join the selected chunk texts into one context string."""
    return CONTEXT_SEPARATOR.join(select_context(question_vector, index, max_tokens, tokenizer))


__all__ = ["build_context", "select_context", "CONTEXT_SEPARATOR", "CHUNK_OVERHEAD_TOKENS"]
