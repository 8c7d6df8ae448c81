"""Common ingestion and index data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class DocumentMeta:
    """Cheap change-tracking metadata for a document."""

    path: str
    created_at: int
    modified_at: int
    size_bytes: int


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """A document as handed over by a document source."""

    id: str
    content: str
    meta: DocumentMeta


@dataclass(frozen=True, slots=True)
class Chunk:
    """Token-bounded slice of one document's text."""

    text: str
    fingerprint: str


@dataclass(frozen=True, slots=True)
class IndexedChunk:
    """Chunk paired with its embedding vector."""

    text: str
    fingerprint: str
    embedding: tuple[float, ...]


@dataclass(frozen=True, slots=True)
class SearchIndex:
    """Immutable snapshot of indexed chunks and the fingerprints they cover.

    Reconciliation builds a new snapshot instead of mutating this one, so a
    reader holding a reference always sees a settled index.
    """

    chunks: tuple[IndexedChunk, ...] = ()
    known_fingerprints: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not self.chunks

    @property
    def dimension(self) -> int | None:
        if not self.chunks:
            return None
        return len(self.chunks[0].embedding)


@dataclass(slots=True)
class ReconcileStats:
    """Aggregated reconciliation statistics."""

    documents: int = 0
    kept: int = 0
    dropped: int = 0
    embedded_documents: int = 0
    embedded_chunks: int = 0
    chunks: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "documents": self.documents,
            "kept": self.kept,
            "dropped": self.dropped,
            "embedded_documents": self.embedded_documents,
            "embedded_chunks": self.embedded_chunks,
            "chunks": self.chunks,
        }


@dataclass(slots=True)
class ReconcileResult:
    """Outcome of one reconciliation pass."""

    index: SearchIndex
    stats: ReconcileStats


__all__ = [
    "DocumentMeta",
    "SourceDocument",
    "Chunk",
    "IndexedChunk",
    "SearchIndex",
    "ReconcileStats",
    "ReconcileResult",
]
