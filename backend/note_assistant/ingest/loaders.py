"""Document sources for note folders."""

from __future__ import annotations

import fnmatch
from pathlib import Path
from typing import Iterator, Protocol

from note_assistant.core.logging import get_logger
from note_assistant.ingest.types import DocumentMeta, SourceDocument

logger = get_logger(__name__)


class DocumentSource(Protocol):
    def list_documents(self) -> list[SourceDocument]: ...


class VaultSource:
    """Enumerate note files under a folder.

    Each document's content is the file name followed by the file text, so the
    title takes part in retrieval. Metadata paths are relative to ``root``.
    """

    def __init__(
        self,
        root: Path,
        include_glob: str | None = "**/*.md",
        exclude_glob: str | None = None,
    ) -> None:
        self.root = root.expanduser()
        self.include_glob = include_glob
        self.exclude_glob = exclude_glob

    def list_documents(self) -> list[SourceDocument]:
        if not self.root.is_dir():
            logger.warning("Notes folder %s does not exist", self.root)
            return []
        documents: list[SourceDocument] = []
        for path in self._iter_files():
            try:
                documents.append(self._load(path))
            except OSError as exc:
                logger.warning("Failed to read %s: %s", path, exc)
        return documents

    def _iter_files(self) -> Iterator[Path]:
        for file_path in sorted(self.root.rglob("*")):
            if not file_path.is_file():
                continue
            relative = file_path.relative_to(self.root).as_posix()
            if _matches_patterns(relative, self.include_glob, self.exclude_glob):
                yield file_path

    def _load(self, path: Path) -> SourceDocument:
        stat = path.stat()
        text = path.read_bytes().decode("utf-8", errors="ignore")
        relative = path.relative_to(self.root).as_posix()
        created = getattr(stat, "st_birthtime", stat.st_ctime)
        meta = DocumentMeta(
            path=relative,
            created_at=int(created * 1000),
            modified_at=int(stat.st_mtime * 1000),
            size_bytes=stat.st_size,
        )
        return SourceDocument(id=relative, content=path.name + text, meta=meta)


def _matches_patterns(path_str: str, include: str | None, exclude: str | None) -> bool:
    if exclude and any(_fnmatch(path_str, pattern) for pattern in _expand_patterns(exclude)):
        return False
    if include:
        return any(_fnmatch(path_str, pattern) for pattern in _expand_patterns(include))
    return True


def _fnmatch(path_str: str, pattern: str) -> bool:
    if fnmatch.fnmatch(path_str, pattern):
        return True
    # "**/" also matches files sitting directly in the root
    if pattern.startswith("**/"):
        return fnmatch.fnmatch(path_str, pattern[3:])
    return False


def _expand_patterns(pattern: str) -> list[str]:
    patterns = []
    for part in _split_top_level(pattern):
        part = part.strip()
        if not part:
            continue
        if "{" in part and "}" in part:
            prefix = part[: part.index("{")]
            suffix = part[part.index("}") + 1 :]
            options = part[part.index("{") + 1 : part.index("}")].split(",")
            for option in options:
                patterns.append(f"{prefix}{option.strip()}{suffix}")
        else:
            patterns.append(part)
    return patterns or [pattern]


def _split_top_level(pattern: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current = ""
    for char in pattern:
        if char == "{":
            depth += 1
        elif char == "}":
            depth = max(0, depth - 1)
        if char == "," and depth == 0:
            parts.append(current)
            current = ""
            continue
        current += char
    parts.append(current)
    return parts


__all__ = ["DocumentSource", "VaultSource"]
