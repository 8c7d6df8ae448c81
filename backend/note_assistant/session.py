"""Assistant session: settings, capabilities, and the current index snapshot."""

from __future__ import annotations

import threading
import time

from note_assistant.answer.engine import Answer, AnswerEngine
from note_assistant.answer.generation import GenerationService, OpenAICompletionService
from note_assistant.core.config import Settings
from note_assistant.core.errors import AssistantError
from note_assistant.core.logging import get_logger
from note_assistant.core.metrics import INDEX_SIZE, RECONCILE_DURATION
from note_assistant.db.sqlite import SQLiteDatabase
from note_assistant.db.store import IndexStore
from note_assistant.index.reconcile import reconcile
from note_assistant.ingest.embeddings import (
    Embedder,
    EmbeddingService,
    HashedEmbeddingService,
    OpenAIEmbeddingService,
)
from note_assistant.ingest.loaders import DocumentSource, VaultSource
from note_assistant.ingest.tokenizer import Tokenizer, WhitespaceTokenizer
from note_assistant.ingest.types import ReconcileStats, SearchIndex

logger = get_logger(__name__)


class AssistantSession:
    """Owns the index snapshot and runs reconciliation and answering.

    At most one reconciliation runs at a time. A finished reconciliation is
    persisted first and only then swapped in as the new snapshot, so questions
    asked meanwhile are answered from the previous, fully settled index.
    """

    def __init__(
        self,
        settings: Settings,
        embedding_service: EmbeddingService,
        generator: GenerationService,
        store: IndexStore,
        source: DocumentSource,
        tokenizer: Tokenizer | None = None,
    ) -> None:
        self.settings = settings
        self.embedder = Embedder(embedding_service)
        self.generator = generator
        self.store = store
        self.source = source
        self.tokenizer = tokenizer or WhitespaceTokenizer()
        self._index: SearchIndex | None = None
        self._reconcile_lock = threading.Lock()
        self._background: threading.Thread | None = None
        self.engine = AnswerEngine(
            self.embedder,
            generator,
            self.snapshot,
            tokenizer=self.tokenizer,
            max_context_tokens=settings.max_context_tokens,
            max_answer_tokens=settings.max_answer_tokens,
            stop_sequence=settings.stop_sequence,
        )

    def snapshot(self) -> SearchIndex | None:
        """Current index, or ``None`` before anything has been loaded."""
        return self._index

    @property
    def is_indexed(self) -> bool:
        return self._index is not None and not self._index.is_empty

    def load(self) -> bool:
        """Load the persisted index; return whether it holds any chunks."""
        index = self.store.load()
        self._swap(index)
        return not index.is_empty

    def reindex(self, rebuild: bool = False) -> ReconcileStats:
        """Reconcile the index with the document source and persist it.

        With ``rebuild`` every document is embedded again from scratch.
        Raises ``EmbeddingServiceError`` without touching the stored index.
        """
        with self._reconcile_lock:
            return self._reindex(rebuild)

    def reindex_in_background(self) -> bool:
        """Start a reconciliation thread unless one is already running."""
        if not self._reconcile_lock.acquire(blocking=False):
            logger.debug("Reconciliation already running; not starting another")
            return False
        thread = threading.Thread(target=self._background_reindex, name="note-assistant-reindex", daemon=True)
        self._background = thread
        try:
            thread.start()
        except RuntimeError:
            self._reconcile_lock.release()
            raise
        return True

    def wait_for_background(self, timeout: float | None = None) -> None:
        thread = self._background
        if thread is not None:
            thread.join(timeout)

    def ask(self, question: str) -> Answer:
        # nothing is refreshed until the notes were indexed explicitly
        if self.settings.auto_update and self.is_indexed:
            self.reindex_in_background()
        return self.engine.answer(question)

    def status(self) -> dict[str, object]:
        index = self._index
        return {
            "indexed": self.is_indexed,
            "stored": self.store.has_data(),
            "chunks": len(index.chunks) if index else 0,
            "documents": len(index.known_fingerprints) if index else 0,
            "dimension": index.dimension if index else None,
            "reindexing": self._reconcile_lock.locked(),
        }

    def close(self) -> None:
        self.wait_for_background()
        self.store.db.close()

    def _reindex(self, rebuild: bool) -> ReconcileStats:
        started = time.perf_counter()
        old_index = SearchIndex() if rebuild else self.store.load()
        documents = self.source.list_documents()
        result = reconcile(
            old_index,
            documents,
            self.embedder,
            max_chunk_tokens=self.settings.chunk_max_tokens,
            tokenizer=self.tokenizer,
        )
        self.store.save(result.index)
        self._swap(result.index)
        RECONCILE_DURATION.observe(time.perf_counter() - started)
        return result.stats

    def _background_reindex(self) -> None:
        try:
            stats = self._reindex(rebuild=False)
            logger.info("Background reconciliation finished", extra={"ctx_stats": stats.to_dict()})
        except AssistantError as exc:
            logger.warning("Background reconciliation failed: %s", exc)
        except Exception:
            logger.exception("Background reconciliation crashed")
        finally:
            self._reconcile_lock.release()

    def _swap(self, index: SearchIndex) -> None:
        self._index = index
        INDEX_SIZE.set(len(index.chunks))


def build_session(settings: Settings) -> AssistantSession:
    """Wire the configured capabilities into a session and load the stored index."""
    embedding_service: EmbeddingService
    if settings.embedding_backend == "hashed":
        embedding_service = HashedEmbeddingService()
    else:
        embedding_service = OpenAIEmbeddingService(
            api_key=settings.api_key,
            model=settings.embedding_model,
            api_base=settings.api_base,
            timeout=settings.request_timeout,
        )
    generator = OpenAICompletionService(
        api_key=settings.api_key,
        model=settings.completion_model,
        api_base=settings.api_base,
        timeout=settings.request_timeout,
    )
    store = IndexStore(SQLiteDatabase(settings.db_path))
    source = VaultSource(settings.notes_dir, settings.include_glob, settings.exclude_glob)
    session = AssistantSession(settings, embedding_service, generator, store, source)
    session.load()
    return session


__all__ = ["AssistantSession", "build_session"]
