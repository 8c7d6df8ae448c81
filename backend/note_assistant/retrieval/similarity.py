"""Vector similarity and ranking."""

from __future__ import annotations

import math
from typing import Sequence

from note_assistant.ingest.types import IndexedChunk


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between ``a`` and ``b``; 0.0 when either is a zero vector."""
    if len(a) != len(b):
        raise ValueError("Vector dimension mismatch")
    denominator = _magnitude(a) * _magnitude(b)
    if denominator == 0:
        return 0.0
    return _dot(a, b) / denominator


def rank_chunks(question_vector: Sequence[float], chunks: Sequence[IndexedChunk]) -> list[IndexedChunk]:
    """Return a new list of ``chunks`` ordered from most to least similar.

    The sort is stable, so equally similar chunks keep their index order.
    """
    scored = [(cosine_similarity(question_vector, chunk.embedding), chunk) for chunk in chunks]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [chunk for _, chunk in scored]


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return sum(x * y for x, y in zip(a, b))


def _magnitude(vector: Sequence[float]) -> float:
    return math.sqrt(sum(value * value for value in vector))


__all__ = ["cosine_similarity", "rank_chunks"]
