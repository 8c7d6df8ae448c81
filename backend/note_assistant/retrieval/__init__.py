"""Retrieval components."""

from .context import build_context, select_context
from .similarity import cosine_similarity, rank_chunks

__all__ = [
    "build_context",
    "select_context",
    "cosine_similarity",
    "rank_chunks",
]
