"""Embedding utilities."""

from __future__ import annotations

import hashlib
import logging
import math
import re
from typing import Protocol, Sequence

import requests

from note_assistant.core.errors import EmbeddingServiceError
from note_assistant.utils.http import post_json

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\w+")


class EmbeddingService(Protocol):
    """Maps texts to fixed-length vectors, one per text, in order."""

    def embed(self, texts: Sequence[str]) -> list[list[float]]: ...


class OpenAIEmbeddingService:
    """Embedding capability backed by an OpenAI-compatible ``/embeddings`` endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-ada-002",
        api_base: str = "https://api.openai.com/v1",
        timeout: float = 60.0,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.url = f"{api_base.rstrip('/')}/embeddings"
        self.timeout = timeout
        self._session = session

    def embed(self, texts: Sequence[str]) -> list[list[float]]:
        body = post_json(
            self.url,
            {"input": list(texts), "model": self.model},
            api_key=self.api_key,
            timeout=self.timeout,
            error_cls=EmbeddingServiceError,
            session=self._session,
        )
        try:
            rows = sorted(body["data"], key=lambda row: row.get("index", 0))
            return [[float(value) for value in row["embedding"]] for row in rows]
        except (KeyError, TypeError, ValueError) as exc:
            raise EmbeddingServiceError("Malformed embedding reply") from exc


class HashedEmbeddingService:
    """Offline hashed bag-of-words embeddings with deterministic output."""

    def __init__(self, dim: int = 384) -> None:
        self.dim = dim

    def embed(self, texts: Sequence[str]) -> list[list[float]]:
        vectors: list[list[float]] = []
        for text in texts:
            vector = [0.0] * self.dim
            for token in _tokenize(text):
                vector[_hash_token(token, self.dim)] += 1.0
            _normalize(vector)
            vectors.append(vector)
        return vectors


class Embedder:
    """Validating wrapper around an embedding capability."""

    def __init__(self, service: EmbeddingService) -> None:
        self.service = service

    def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed ``texts`` in one batched call, one vector per text."""
        batch = list(texts)
        if not batch:
            return []
        try:
            vectors = self.service.embed(batch)
        except EmbeddingServiceError:
            raise
        except Exception as exc:
            logger.exception("Embedding service failed: %s", exc)
            raise EmbeddingServiceError(f"Embedding service failed: {exc}") from exc
        if len(vectors) != len(batch):
            raise EmbeddingServiceError(
                f"Embedding service returned {len(vectors)} vectors for {len(batch)} texts"
            )
        dims = {len(vector) for vector in vectors}
        if len(dims) != 1 or 0 in dims:
            raise EmbeddingServiceError("Embedding service returned vectors of inconsistent dimension")
        return [list(vector) for vector in vectors]

    def embed_query(self, text: str) -> list[float]:
        """Convenience wrapper for single-text embedding."""
        return self.embed([text])[0]


def _tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall(text.lower())


def _hash_token(token: str, dim: int) -> int:
    digest = hashlib.blake2b(token.encode("utf-8"), digest_size=8).digest()
    value = int.from_bytes(digest, "big")
    return value % dim


def _normalize(vector: list[float]) -> None:
    norm = math.sqrt(sum(value * value for value in vector))
    if norm == 0:
        return
    inv = 1.0 / norm
    for idx, value in enumerate(vector):
        vector[idx] = value * inv


__all__ = [
    "EmbeddingService",
    "OpenAIEmbeddingService",
    "HashedEmbeddingService",
    "Embedder",
]
