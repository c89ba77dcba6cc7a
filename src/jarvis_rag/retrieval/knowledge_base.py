"""
Knowledge base - the operations the HTTP layer calls.

Wraps a vector store with input validation, error policy, logging and
tracing. The error policy is asymmetric:

- add_document fails CLOSED: embedding errors propagate and the
  store stays unchanged.
- search_documents fails OPEN: any retrieval error is logged as a
  degraded search and [] is returned, so the assistant still answers
  (without grounding).
"""

from __future__ import annotations

import logging

from jarvis_rag.config import RagConfig, get_config
from jarvis_rag.core.exceptions import ValidationError
from jarvis_rag.core.protocols import (
    DocumentResult,
    DocumentSummary,
    EmbeddingProvider,
    StoreStats,
    VectorStore,
)
from jarvis_rag.observability import get_tracer
from jarvis_rag.observability.attributes import (
    OUTCOME_DEGRADED,
    OUTCOME_EMPTY,
    OUTCOME_HITS,
    RAG_DOCUMENT_DELETED,
    RAG_DOCUMENT_ID,
    RAG_RETRIEVAL_ERROR,
    RAG_STORE_SIZE,
    retrieval_attributes,
)
from jarvis_rag.observability.tracer import TracerProtocol
from jarvis_rag.retrieval.ranking import DEFAULT_LIMIT, DEFAULT_THRESHOLD
from jarvis_rag.retrieval.store import InMemoryVectorStore
from jarvis_rag.schemas.chat import parse_document, parse_search

logger = logging.getLogger(__name__)


class KnowledgeBase:
    """
    Document CRUD and semantic search over an injected vector store.

    Several instances can coexist; nothing is held at module level.
    """

    def __init__(
        self,
        store: VectorStore,
        default_limit: int = DEFAULT_LIMIT,
        threshold: float = DEFAULT_THRESHOLD,
        tracer: TracerProtocol | None = None,
    ):
        self.store = store
        self.default_limit = default_limit
        self.threshold = threshold
        self._tracer = tracer

    @classmethod
    def from_config(
        cls,
        config: RagConfig | None = None,
        embeddings: EmbeddingProvider | None = None,
    ) -> "KnowledgeBase":
        """Build a knowledge base with an in-memory store using config defaults."""
        config = config or get_config()
        if embeddings is None:
            from jarvis_rag.embeddings import get_embedding_provider

            embeddings = get_embedding_provider(config.embedding_backend, config.embedding_model)
        return cls(
            InMemoryVectorStore(embeddings),
            default_limit=config.search_limit,
            threshold=config.similarity_threshold,
        )

    @property
    def tracer(self) -> TracerProtocol:
        return self._tracer or get_tracer()

    def add_document(self, id: str, title: str, content: str) -> DocumentSummary:
        """
        Index a document, replacing any earlier version with the same id.

        Raises:
            ValidationError: id, title or content missing or blank
            ModelUnavailable: the embedding model could not produce a vector
        """
        doc = parse_document(id, title, content)

        with self.tracer.start_span(
            "knowledge_base.add_document", attributes={RAG_DOCUMENT_ID: doc.id}
        ) as span:
            try:
                record = self.store.upsert(doc.id, doc.title, doc.content)
            except Exception as e:
                logger.error("Error adding document %s to vector store: %s", doc.id, e)
                span.record_exception(e)
                span.set_status("error", str(e))
                raise
            span.set_attribute(RAG_STORE_SIZE, len(self.store))
            span.set_status("ok")

        return DocumentSummary(id=record.id, title=record.title, created_at=record.created_at)

    def delete_document(self, id: str) -> bool:
        """Remove a document. Returns False when the id was not indexed."""
        if id is None or not str(id).strip():
            raise ValidationError("id", "Document ID is required")

        with self.tracer.start_span(
            "knowledge_base.delete_document", attributes={RAG_DOCUMENT_ID: id}
        ) as span:
            deleted = self.store.delete(id)
            span.set_attribute(RAG_DOCUMENT_DELETED, deleted)
            span.set_attribute(RAG_STORE_SIZE, len(self.store))
        return deleted

    def search_documents(self, query: str, limit: int | None = None) -> list[DocumentResult]:
        """
        Return up to `limit` documents relevant to `query`, best first.

        Never raises for retrieval failures: a broken model yields [],
        the same value as "nothing relevant". Logs and the span's
        rag.retrieval.outcome attribute tell the two apart.

        Raises:
            ValidationError: query missing or blank
        """
        request = parse_search(query, limit)
        limit = self.default_limit if request.limit is None else request.limit
        store_size = len(self.store)

        with self.tracer.start_span("knowledge_base.search") as span:
            try:
                results = self.store.search(request.query, limit=limit, threshold=self.threshold)
            except Exception as e:
                logger.warning(
                    "Retrieval degraded, answering without knowledge base context: %s", e
                )
                span.record_exception(e)
                for key, value in retrieval_attributes(
                    OUTCOME_DEGRADED, limit, self.threshold, store_size
                ).items():
                    span.set_attribute(key, value)
                span.set_attribute(RAG_RETRIEVAL_ERROR, type(e).__name__)
                return []

            outcome = OUTCOME_HITS if results else OUTCOME_EMPTY
            if not results:
                logger.info("No relevant documents found (store size %d)", store_size)
            for key, value in retrieval_attributes(
                outcome,
                limit,
                self.threshold,
                store_size,
                doc_ids=[r.id for r in results],
                top_score=results[0].score if results else None,
            ).items():
                span.set_attribute(key, value)

        return results

    def get_stats(self) -> StoreStats:
        documents = self.store.list()
        return StoreStats(total_documents=len(documents), documents=documents)
