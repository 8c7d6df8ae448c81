"""Hashing utilities."""

from __future__ import annotations

import hashlib


def sha1_text(text: str) -> str:
    """Return hex SHA-1 digest of UTF-8 text."""
    return hashlib.sha1(text.encode("utf-8")).hexdigest()
