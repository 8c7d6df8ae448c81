"""Tests for the answer engine."""

from __future__ import annotations

from conftest import FakeEmbeddingService, FakeGenerator
from note_assistant.answer.engine import FALLBACK_ANSWER, UNKNOWN_ANSWER, AnswerEngine, build_prompt
from note_assistant.ingest.embeddings import Embedder, HashedEmbeddingService
from note_assistant.ingest.types import IndexedChunk, SearchIndex

INDEX = SearchIndex(
    chunks=(
        IndexedChunk(text="garden.md The tomatoes go by the fence.", fingerprint="g", embedding=(40.0, 1.0, 0.0)),
        IndexedChunk(text="kitchen.md Paint the walls blue.", fingerprint="k", embedding=(0.0, 1.0, 5.0)),
    ),
    known_fingerprints=frozenset({"g", "k"}),
)


def _engine(embedding_service, generator, index=INDEX, **kwargs) -> AnswerEngine:
    return AnswerEngine(Embedder(embedding_service), generator, lambda: index, **kwargs)


def test_answer_before_index_loaded_makes_no_calls(
    embedding_service: FakeEmbeddingService, generator: FakeGenerator
) -> None:
    answer = _engine(embedding_service, generator, index=None).answer("Where are the tomatoes?")
    assert answer.error is True
    assert answer.text.startswith("Data not loaded")
    assert embedding_service.calls == []
    assert generator.prompts == []


def test_empty_index_counts_as_not_loaded(
    embedding_service: FakeEmbeddingService, generator: FakeGenerator
) -> None:
    answer = _engine(embedding_service, generator, index=SearchIndex()).answer("Anything?")
    assert answer.error is True
    assert embedding_service.calls == []


def test_successful_answer(embedding_service: FakeEmbeddingService) -> None:
    generator = FakeGenerator(reply=" By the fence.")
    answer = _engine(embedding_service, generator, max_answer_tokens=99, stop_sequence="\n").answer(
        "Where are the tomatoes?"
    )
    assert answer.error is False
    assert answer.text == "By the fence."
    assert embedding_service.calls == [["Where are the tomatoes?"]]
    prompt = generator.prompts[0]
    assert "tomatoes go by the fence" in prompt
    assert prompt.endswith("Question: Where are the tomatoes?\nAnswer:")
    assert UNKNOWN_ANSWER in prompt
    options = generator.options[0]
    assert options.temperature == 0
    assert options.max_tokens == 99
    assert options.stop == "\n"


def test_missing_completion_falls_back(embedding_service: FakeEmbeddingService) -> None:
    answer = _engine(embedding_service, FakeGenerator(reply=None)).answer("Where?")
    assert answer.error is False
    assert answer.text == FALLBACK_ANSWER


def test_generation_failure_becomes_error_answer(embedding_service: FakeEmbeddingService) -> None:
    answer = _engine(embedding_service, FakeGenerator(fail=True)).answer("Where?")
    assert answer.error is True
    assert "service unavailable" in answer.text


def test_embedding_failure_becomes_error_answer(generator: FakeGenerator) -> None:
    answer = _engine(FakeEmbeddingService(fail=True), generator).answer("Where?")
    assert answer.error is True
    assert "quota exceeded" in answer.text
    assert generator.prompts == []


def test_blank_question_is_rejected(embedding_service: FakeEmbeddingService, generator: FakeGenerator) -> None:
    answer = _engine(embedding_service, generator).answer("   ")
    assert answer.error is True
    assert embedding_service.calls == []


def test_context_budget_applies(embedding_service: FakeEmbeddingService, generator: FakeGenerator) -> None:
    _engine(embedding_service, generator, max_context_tokens=12).answer("Where are the tomatoes?")
    prompt = generator.prompts[0]
    assert "tomatoes go by the fence" in prompt
    assert "Paint the walls" not in prompt


def test_build_prompt_layout() -> None:
    prompt = build_prompt("CTX", "Q?")
    assert "Context: CTX\n\n---\n\nQuestion: Q?\nAnswer:" in prompt


def test_changed_embedding_dimension_asks_for_rebuild(generator: FakeGenerator) -> None:
    answer = _engine(HashedEmbeddingService(dim=8), generator).answer("Where?")
    assert answer.error is True
    assert "dimension changed from 3 to 8" in answer.text
    assert "rebuild" in answer.text
    assert generator.prompts == []
