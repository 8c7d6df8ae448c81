"""Question answering over the note index."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from note_assistant.answer.generation import GenerationOptions, GenerationService
from note_assistant.core.errors import (
    AssistantError,
    EmbeddingServiceError,
    GenerationServiceError,
    NotIndexedError,
)
from note_assistant.core.logging import get_logger
from note_assistant.core.metrics import ANSWER_COUNT
from note_assistant.ingest.embeddings import Embedder
from note_assistant.ingest.tokenizer import Tokenizer, WhitespaceTokenizer
from note_assistant.ingest.types import SearchIndex
from note_assistant.retrieval.context import build_context

logger = get_logger(__name__)

UNKNOWN_ANSWER = "I don't know, I couldn't find anything related to this in your notes."
FALLBACK_ANSWER = "Something went wrong."

PROMPT_TEMPLATE = (
    "Answer the question based on the context below, and if the question can't be answered "
    'based on the context, say "{unknown}"\n\n'
    "Context: {context}\n\n---\n\nQuestion: {question}\nAnswer:"
)


@dataclass(frozen=True, slots=True)
class Answer:
    error: bool
    text: str

    def to_dict(self) -> dict[str, object]:
        return {"error": self.error, "text": self.text}


def build_prompt(context: str, question: str) -> str:
    return PROMPT_TEMPLATE.format(unknown=UNKNOWN_ANSWER, context=context, question=question)


class AnswerEngine:
    """Embed the question, pack the context, and ask the generation service.

    ``index_source`` is called once per question; whatever snapshot it returns
    is used for the whole answer even if a reconciliation finishes meanwhile.
    """

    def __init__(
        self,
        embedder: Embedder,
        generator: GenerationService,
        index_source: Callable[[], SearchIndex | None],
        *,
        tokenizer: Tokenizer | None = None,
        max_context_tokens: int = 1800,
        max_answer_tokens: int = 150,
        stop_sequence: str | None = None,
    ) -> None:
        self.embedder = embedder
        self.generator = generator
        self.index_source = index_source
        self.tokenizer = tokenizer or WhitespaceTokenizer()
        self.max_context_tokens = max_context_tokens
        self.options = GenerationOptions(max_tokens=max_answer_tokens, stop=stop_sequence)

    def answer(self, question: str) -> Answer:
        try:
            text = self._answer(question)
        except AssistantError as exc:
            logger.warning("Could not answer question: %s", exc)
            ANSWER_COUNT.labels(outcome=type(exc).__name__).inc()
            return Answer(error=True, text=str(exc))
        except Exception as exc:
            logger.exception("Unexpected failure while answering: %s", exc)
            ANSWER_COUNT.labels(outcome="unexpected").inc()
            return Answer(error=True, text=f"Unexpected error: {exc}")
        ANSWER_COUNT.labels(outcome="ok").inc()
        return Answer(error=False, text=text)

    def _answer(self, question: str) -> str:
        index = self.index_source()
        if index is None or index.is_empty:
            raise NotIndexedError()
        if not question or not question.strip():
            raise AssistantError("Please enter a question.")
        question_vector = self.embedder.embed_query(question)
        if index.dimension is not None and len(question_vector) != index.dimension:
            raise EmbeddingServiceError(
                f"Embedding dimension changed from {index.dimension} to {len(question_vector)}; rebuild the index"
            )
        context = build_context(question_vector, index, self.max_context_tokens, self.tokenizer)
        try:
            completion = self.generator.complete(build_prompt(context, question), self.options)
        except GenerationServiceError:
            raise
        except Exception as exc:
            raise GenerationServiceError(f"Generation service failed: {exc}") from exc
        if completion is None or not completion.strip():
            return FALLBACK_ANSWER
        return completion.strip()


__all__ = ["Answer", "AnswerEngine", "build_prompt", "UNKNOWN_ANSWER", "FALLBACK_ANSWER"]
