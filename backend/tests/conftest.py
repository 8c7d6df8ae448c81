"""Test fixtures for Note Assistant."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Sequence

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from note_assistant.answer.generation import GenerationOptions  # noqa: E402
from note_assistant.ingest.types import DocumentMeta, SourceDocument  # noqa: E402


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset cached singletons and environment between tests."""
    monkeypatch.setenv("NASST_DB_PATH", str(tmp_path / "index.db"))
    monkeypatch.setenv("NASST_NOTES_DIR", str(tmp_path / "notes"))
    monkeypatch.delenv("NASST_CONFIG", raising=False)
    monkeypatch.delenv("NASST_API_KEY", raising=False)

    from note_assistant.api import dependencies as deps
    from note_assistant.core.config import get_settings

    deps.get_app_settings.cache_clear()
    get_settings.cache_clear()
    deps.close_session()
    yield
    deps.close_session()
    deps.get_app_settings.cache_clear()
    get_settings.cache_clear()


class FakeEmbeddingService:
    """Records every call and returns simple deterministic vectors."""

    def __init__(self, fail: bool = False) -> None:
        self.calls: list[list[str]] = []
        self.fail = fail

    def embed(self, texts: Sequence[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        if self.fail:
            raise RuntimeError("quota exceeded")
        return [[float(len(text)), 1.0, float(idx)] for idx, text in enumerate(texts)]


class FakeGenerator:
    def __init__(self, reply: str | None = "An answer.", fail: bool = False) -> None:
        self.reply = reply
        self.fail = fail
        self.prompts: list[str] = []
        self.options: list[GenerationOptions] = []

    def complete(self, prompt: str, options: GenerationOptions) -> str | None:
        self.prompts.append(prompt)
        self.options.append(options)
        if self.fail:
            raise RuntimeError("service unavailable")
        return self.reply


class StaticSource:
    def __init__(self, documents: list[SourceDocument] | None = None) -> None:
        self.documents = documents or []

    def list_documents(self) -> list[SourceDocument]:
        return list(self.documents)


class FakeResponse:
    def __init__(self, status_code: int, payload: Any) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = str(payload)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        return self._payload


class FakeHTTPSession:
    """Stands in for ``requests.Session``; records each POST."""

    def __init__(self, response: FakeResponse | None = None, exc: Exception | None = None) -> None:
        self.response = response
        self.exc = exc
        self.calls: list[dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.exc is not None:
            raise self.exc
        assert self.response is not None
        return self.response


def make_document(doc_id: str, content: str, modified_at: int = 1) -> SourceDocument:
    meta = DocumentMeta(path=doc_id, created_at=0, modified_at=modified_at, size_bytes=len(content))
    return SourceDocument(id=doc_id, content=content, meta=meta)


@pytest.fixture
def embedding_service() -> FakeEmbeddingService:
    return FakeEmbeddingService()


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture(scope="session")
def sample_text() -> str:
    return "Sentence one. Sentence two. Sentence three."
