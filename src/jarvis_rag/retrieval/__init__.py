"""
Retrieval module - embedding-indexed document store and similarity search.

This module provides:
- Document: The stored record
- InMemoryVectorStore: Copy-on-write store with exact cosine search
- rank_documents(): Top-K ranking above a relevance floor
- KnowledgeBase: Validated add/delete/search/stats facade
- Seed helpers for samples and note directories

ARCHITECTURE:
-------------
1. Protocol defines the contract (in core.protocols)
2. Implementation (InMemoryVectorStore) with injected embeddings
3. Factory function for instantiation
4. Test doubles (MockEmbeddings) for fast unit tests
"""

from jarvis_rag.retrieval.document import Document, embedding_text
from jarvis_rag.retrieval.ranking import (
    DEFAULT_LIMIT,
    DEFAULT_THRESHOLD,
    cosine_similarity,
    rank_documents,
    score_documents,
)
from jarvis_rag.retrieval.store import InMemoryVectorStore, get_vector_store
from jarvis_rag.retrieval.knowledge_base import KnowledgeBase
from jarvis_rag.retrieval.seeds import (
    get_sample_documents,
    load_documents_from_dir,
    seed_knowledge_base,
)

__all__ = [
    # Document
    "Document",
    "embedding_text",
    # Ranking
    "DEFAULT_LIMIT",
    "DEFAULT_THRESHOLD",
    "cosine_similarity",
    "rank_documents",
    "score_documents",
    # Store
    "InMemoryVectorStore",
    "get_vector_store",
    "KnowledgeBase",
    # Seeds
    "get_sample_documents",
    "load_documents_from_dir",
    "seed_knowledge_base",
]
