"""
Core protocols defining contracts for the RAG system.

Every infrastructure component implements one of these protocols,
so the knowledge base, prompt builder and graph nodes can be wired
with real backends in production and cheap doubles in tests.

PATTERN:
--------
- Protocol defines the contract
- Multiple implementations possible
- Factory functions for instantiation
- Test doubles for fast unit tests
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

import numpy as np


# ---------------------------------------------------------------------------
# EMBEDDING PROVIDER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Contract for embedding generation.

    Returned vectors are L2-normalized, so a dot product between any
    two of them is their cosine similarity.

    Implementations:
    - SentenceTransformerEmbeddings (local model, default)
    - OpenAIEmbeddings (hosted API)
    - MockEmbeddings (testing)
    """

    @property
    def dimensions(self) -> int:
        """Length of every vector this provider returns."""
        ...

    def embed(self, text: str) -> np.ndarray:
        """Generate a unit-norm embedding for a single text."""
        ...

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate unit-norm embeddings for multiple texts."""
        ...


# ---------------------------------------------------------------------------
# VECTOR STORE PROTOCOL
# ---------------------------------------------------------------------------


@dataclass
class DocumentResult:
    """A retrieved document with similarity score."""
    id: str
    title: str
    content: str
    score: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "score": self.score,
        }


@dataclass
class DocumentSummary:
    """Lightweight listing entry: no content, no embedding."""
    id: str
    title: str
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class StoreStats:
    """Snapshot of the knowledge base for inspection endpoints."""
    total_documents: int
    documents: list[DocumentSummary] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_documents": self.total_documents,
            "documents": [doc.to_dict() for doc in self.documents],
        }


@runtime_checkable
class VectorStore(Protocol):
    """
    Contract for an embedding-indexed document store.

    Implementations:
    - InMemoryVectorStore (exact linear scan)
    """

    def upsert(self, id: str, title: str, content: str) -> Any:
        """Embed and insert a document, replacing any record with the same id."""
        ...

    def delete(self, id: str) -> bool:
        """Remove a document. Returns False if it was not present."""
        ...

    def list(self) -> list[DocumentSummary]:
        """List stored documents without content or embeddings."""
        ...

    def search(
        self,
        query: str,
        limit: int = 3,
        threshold: float = 0.3,
    ) -> list[DocumentResult]:
        """Rank stored documents against a query text."""
        ...

    def __len__(self) -> int:
        ...


# ---------------------------------------------------------------------------
# CHAT CLIENT PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class ChatClient(Protocol):
    """
    Contract for the chat-completion collaborator.

    Implementations:
    - OpenAIChatClient (any OpenAI-compatible endpoint, LM Studio by default)
    """

    def complete(self, messages: list[dict[str, str]]) -> str:
        """Send a message list and return the assistant's reply text."""
        ...
