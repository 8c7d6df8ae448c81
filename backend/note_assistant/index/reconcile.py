"""Incremental index reconciliation."""

from __future__ import annotations

from typing import Sequence

from note_assistant.core.errors import EmbeddingServiceError
from note_assistant.core.logging import get_logger
from note_assistant.core.metrics import EMBEDDED_CHUNKS
from note_assistant.ingest.chunker import chunk_text
from note_assistant.ingest.embeddings import Embedder
from note_assistant.ingest.fingerprint import fingerprint_documents
from note_assistant.ingest.tokenizer import Tokenizer
from note_assistant.ingest.types import (
    Chunk,
    IndexedChunk,
    ReconcileResult,
    ReconcileStats,
    SearchIndex,
    SourceDocument,
)

logger = get_logger(__name__)


def reconcile(
    old_index: SearchIndex,
    documents: Sequence[SourceDocument],
    embedder: Embedder,
    *,
    max_chunk_tokens: int = 500,
    tokenizer: Tokenizer | None = None,
) -> ReconcileResult:
    """Bring ``old_index`` in line with the current document set.

    Chunks of documents whose fingerprint is unchanged are kept as they are,
    chunks of vanished documents are dropped, and only new or changed
    documents are chunked and embedded, all in a single embedding call.
    ``old_index`` is never modified; an ``EmbeddingServiceError`` propagates
    before any new index exists.
    """
    stats = ReconcileStats()
    fingerprinted = fingerprint_documents(documents)
    current = frozenset(digest for _, digest in fingerprinted)
    stats.documents = len(fingerprinted)

    kept = tuple(
        chunk
        for chunk in old_index.chunks
        if chunk.fingerprint in current and chunk.fingerprint in old_index.known_fingerprints
    )
    stats.kept = len(kept)
    stats.dropped = len(old_index.chunks) - len(kept)

    pending: list[Chunk] = []
    for document, digest in fingerprinted:
        if digest in old_index.known_fingerprints:
            continue
        stats.embedded_documents += 1
        for text in chunk_text(document.content, max_tokens=max_chunk_tokens, tokenizer=tokenizer):
            pending.append(Chunk(text=text, fingerprint=digest))

    embedded: tuple[IndexedChunk, ...] = ()
    if pending:
        logger.info(
            "Embedding %s chunks from %s new or changed documents",
            len(pending),
            stats.embedded_documents,
        )
        vectors = embedder.embed([chunk.text for chunk in pending])
        _check_dimension(kept, vectors)
        embedded = tuple(
            IndexedChunk(text=chunk.text, fingerprint=chunk.fingerprint, embedding=tuple(vector))
            for chunk, vector in zip(pending, vectors)
        )
        EMBEDDED_CHUNKS.inc(len(embedded))
    stats.embedded_chunks = len(embedded)

    index = SearchIndex(chunks=kept + embedded, known_fingerprints=current)
    stats.chunks = len(index.chunks)
    logger.info(
        "Reconciled %s documents: kept %s chunks, dropped %s, embedded %s",
        stats.documents,
        stats.kept,
        stats.dropped,
        stats.embedded_chunks,
    )
    return ReconcileResult(index=index, stats=stats)


def _check_dimension(kept: Sequence[IndexedChunk], vectors: Sequence[Sequence[float]]) -> None:
    if not kept or not vectors:
        return
    expected = len(kept[0].embedding)
    if len(vectors[0]) != expected:
        raise EmbeddingServiceError(
            f"Embedding dimension changed from {expected} to {len(vectors[0])}; rebuild the index"
        )


__all__ = ["reconcile"]
