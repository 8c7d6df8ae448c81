"""Metadata fingerprints used to detect unchanged documents."""

from __future__ import annotations

from typing import Iterable

from note_assistant.ingest.types import DocumentMeta, SourceDocument
from note_assistant.utils.hashing import sha1_text


def fingerprint(meta: DocumentMeta) -> str:
    """Return a stable fingerprint for document metadata.

    Only path, timestamps and size take part, so the content is never read.
    Two documents with identical metadata are indistinguishable.
    """
    return sha1_text(f"{meta.path}-{meta.created_at}-{meta.modified_at}-{meta.size_bytes}")


def fingerprint_documents(documents: Iterable[SourceDocument]) -> list[tuple[SourceDocument, str]]:
    """Pair each document with its fingerprint, dropping repeats in order."""
    seen: set[str] = set()
    unique: list[tuple[SourceDocument, str]] = []
    for document in documents:
        digest = fingerprint(document.meta)
        if digest in seen:
            continue
        seen.add(digest)
        unique.append((document, digest))
    return unique


__all__ = ["fingerprint", "fingerprint_documents"]
