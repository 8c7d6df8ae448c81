"""Persistence of the search index."""

from __future__ import annotations

import sqlite3
from array import array
from typing import Sequence

from note_assistant.db.sqlite import SQLiteDatabase
from note_assistant.ingest.types import IndexedChunk, SearchIndex


class IndexStore:
    """Reads and writes the whole index in one go.

    ``save`` replaces the chunk and fingerprint tables inside a single
    transaction, so a failed write leaves the previous state in place.
    """

    def __init__(self, database: SQLiteDatabase) -> None:
        self.db = database
        self.db.ensure_schema()

    def load(self) -> SearchIndex:
        rows = self.db.query("SELECT fingerprint, text, vector FROM chunks ORDER BY ordinal")
        chunks = tuple(
            IndexedChunk(
                text=row["text"],
                fingerprint=row["fingerprint"],
                embedding=_from_bytes(row["vector"]),
            )
            for row in rows
        )
        known = frozenset(row["fingerprint"] for row in self.db.query("SELECT fingerprint FROM fingerprints"))
        return SearchIndex(chunks=chunks, known_fingerprints=known)

    def save(self, index: SearchIndex) -> None:
        with self.db.transaction() as cursor:
            cursor.execute("DELETE FROM chunks")
            cursor.execute("DELETE FROM fingerprints")
            cursor.executemany(
                "INSERT INTO chunks (ordinal, fingerprint, text, dim, vector) VALUES (?, ?, ?, ?, ?)",
                [
                    (
                        ordinal,
                        chunk.fingerprint,
                        chunk.text,
                        len(chunk.embedding),
                        sqlite3.Binary(_as_bytes(chunk.embedding)),
                    )
                    for ordinal, chunk in enumerate(index.chunks)
                ],
            )
            cursor.executemany(
                "INSERT INTO fingerprints (fingerprint) VALUES (?)",
                [(fp,) for fp in sorted(index.known_fingerprints)],
            )

    def has_data(self) -> bool:
        row = self.db.query("SELECT COUNT(*) AS count FROM chunks")[0]
        return bool(row["count"])


def _as_bytes(vector: Sequence[float]) -> bytes:
    return array("f", vector).tobytes()


def _from_bytes(raw: bytes) -> tuple[float, ...]:
    floats = array("f")
    floats.frombytes(raw)
    return tuple(floats)


__all__ = ["IndexStore"]
