"""Chunking utilities."""

from __future__ import annotations

from typing import Iterable

from note_assistant.ingest.tokenizer import Tokenizer, WhitespaceTokenizer

SENTENCE_DELIMITER = ". "
_TERMINATORS = (".", "!", "?")

_DEFAULT_TOKENIZER = WhitespaceTokenizer()


def chunk_text(
    text: str,
    max_tokens: int = 500,
    tokenizer: Tokenizer | None = None,
) -> list[str]:
    """Split text into chunks of at most ``max_tokens`` tokens.

    Chunks only break between sentences. A sentence that is longer than
    ``max_tokens`` on its own is dropped rather than cut in half.
    """
    if max_tokens < 1:
        raise ValueError("max_tokens must be positive")
    if not text.strip():
        return []
    counter = tokenizer or _DEFAULT_TOKENIZER
    if counter.count_tokens(text) <= max_tokens:
        return [text]

    chunks: list[str] = []
    current: list[str] = []
    tokens_so_far = 0

    for sentence in text.split(SENTENCE_DELIMITER):
        if not sentence.strip():
            continue
        tokens = counter.count_tokens(" " + sentence)
        if tokens + tokens_so_far > max_tokens:
            if current:
                chunks.append(_close_chunk(current))
            current = []
            tokens_so_far = 0
        if tokens > max_tokens:
            continue
        current.append(sentence)
        # +1 leaves room for the separator rejoined after the sentence
        tokens_so_far += tokens + 1

    if current:
        chunks.append(_close_chunk(current))
    return chunks


def prepare_texts(
    texts: Iterable[str],
    max_tokens: int = 500,
    tokenizer: Tokenizer | None = None,
) -> list[str]:
    """Chunk a batch of texts, flattening the result in input order."""
    prepared: list[str] = []
    for text in texts:
        prepared.extend(chunk_text(text, max_tokens=max_tokens, tokenizer=tokenizer))
    return prepared


def _close_chunk(sentences: list[str]) -> str:
    joined = SENTENCE_DELIMITER.join(sentences).rstrip()
    if joined.endswith(_TERMINATORS):
        return joined
    return joined + "."


__all__ = ["chunk_text", "prepare_texts", "SENTENCE_DELIMITER"]
