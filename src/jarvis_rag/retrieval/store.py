"""
In-memory vector store.

Pattern: Protocol (core.protocols.VectorStore) -> implementation -> factory

CONCURRENCY:
------------
The store is copy-on-write. Writers hold a lock, build a new mapping
and publish it with one reference assignment. Readers take the current
mapping without locking, so a search never blocks on an upsert and
never sees a replace half-applied (no empty window, no duplicate id).

Embedding runs before the lock is taken. If the embedding call fails
or the caller abandons it, the store has not been touched.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable

from jarvis_rag.core.exceptions import DimensionMismatchError
from jarvis_rag.core.protocols import DocumentResult, DocumentSummary, EmbeddingProvider
from jarvis_rag.embeddings.providers import l2_normalize
from jarvis_rag.retrieval.document import Document, embedding_text
from jarvis_rag.retrieval.ranking import DEFAULT_LIMIT, DEFAULT_THRESHOLD, rank_documents

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryVectorStore:
    """
    Embedding-indexed document store with exact cosine search.

    Dependencies are INJECTED, not created internally, so tests can
    pass MockEmbeddings or a MagicMock.

    Growth is unbounded; documents leave only through delete() or clear().
    """

    def __init__(
        self,
        embeddings: EmbeddingProvider,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize with injected embedding provider.

        Args:
            embeddings: Embedding provider for generating vectors
            clock: Source of created_at timestamps
        """
        self._embeddings = embeddings
        self._clock = clock
        self._documents: dict[str, Document] = {}
        self._dimension: int | None = None
        self._write_lock = threading.Lock()

    # -----------------------------------------------------------------------
    # MUTATION
    # -----------------------------------------------------------------------

    def upsert(self, id: str, title: str, content: str) -> Document:
        """
        Embed and store a document, replacing any record with the same id.

        Raises:
            ModelUnavailable: embedding failed; store unchanged
            DimensionMismatchError: vector length differs from stored ones
        """
        # Own the buffer before freezing it; l2_normalize may hand back the input
        vector = l2_normalize(self._embeddings.embed(embedding_text(title, content))).copy()
        vector.setflags(write=False)

        with self._write_lock:
            if self._dimension is not None and vector.shape[0] != self._dimension:
                raise DimensionMismatchError(expected=self._dimension, actual=vector.shape[0])

            doc = Document(
                id=id,
                title=title,
                content=content,
                embedding=vector,
                created_at=self._clock(),
            )
            documents = dict(self._documents)
            replaced = documents.pop(id, None) is not None
            documents[id] = doc
            self._documents = documents
            self._dimension = vector.shape[0]

        if replaced:
            logger.info('Replaced document in vector store: "%s" (Total docs: %d)', title, len(documents))
        else:
            logger.info('Added document to vector store: "%s" (Total docs: %d)', title, len(documents))
        return doc

    def delete(self, id: str) -> bool:
        """Remove a document. Returns False (not an error) when absent."""
        with self._write_lock:
            if id not in self._documents:
                logger.info("Document not found in vector store: %s", id)
                return False
            documents = {doc_id: doc for doc_id, doc in self._documents.items() if doc_id != id}
            self._documents = documents

        logger.info("Deleted document from vector store: %s (Remaining: %d)", id, len(documents))
        return True

    def clear(self) -> None:
        """Remove every document and forget the embedding dimension."""
        with self._write_lock:
            self._documents = {}
            self._dimension = None

    # -----------------------------------------------------------------------
    # READ
    # -----------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, id: object) -> bool:
        return id in self._documents

    @property
    def dimension(self) -> int | None:
        """Embedding dimension shared by all stored records, None until first insert."""
        return self._dimension

    def get(self, id: str) -> Document | None:
        return self._documents.get(id)

    def list(self) -> list[DocumentSummary]:
        """Snapshot of stored documents without content or embeddings."""
        return [doc.summary() for doc in self._documents.values()]

    def snapshot_for_search(self) -> tuple[Document, ...]:
        """Immutable read view in insertion order."""
        return tuple(self._documents.values())

    def search(
        self,
        query: str,
        limit: int = DEFAULT_LIMIT,
        threshold: float = DEFAULT_THRESHOLD,
    ) -> list[DocumentResult]:
        """
        Embed the query and rank the current snapshot.

        An empty store returns [] without embedding the query.
        Embedding errors propagate; KnowledgeBase decides what to do with them.
        """
        snapshot = self.snapshot_for_search()
        if not snapshot:
            logger.info("Vector store is empty")
            return []

        query_embedding = l2_normalize(self._embeddings.embed(query))
        results = rank_documents(query_embedding, snapshot, k=limit, threshold=threshold)

        logger.info(
            "Found %d relevant documents (searched %d total)", len(results), len(snapshot)
        )
        return results


# ---------------------------------------------------------------------------
# FACTORY FUNCTION
# ---------------------------------------------------------------------------


def get_vector_store(embeddings: EmbeddingProvider | None = None) -> InMemoryVectorStore:
    """
    Factory function to get a vector store.

    Args:
        embeddings: Embedding provider (built from config if not provided)
    """
    if embeddings is None:
        from jarvis_rag.embeddings import get_embedding_provider

        embeddings = get_embedding_provider()
    return InMemoryVectorStore(embeddings)
