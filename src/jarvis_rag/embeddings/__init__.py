"""
Embeddings module - text embedding generation.

1. Protocol (EmbeddingProvider) defines the interface
2. Production implementations (SentenceTransformerEmbeddings, OpenAIEmbeddings)
3. Test double (MockEmbeddings) for fast testing
4. Factory function (get_embedding_provider)
"""

from jarvis_rag.core.protocols import EmbeddingProvider
from jarvis_rag.embeddings.providers import (
    SentenceTransformerEmbeddings,
    OpenAIEmbeddings,
    MockEmbeddings,
    get_embedding_provider,
    l2_normalize,
)

__all__ = [
    "EmbeddingProvider",
    "SentenceTransformerEmbeddings",
    "OpenAIEmbeddings",
    "MockEmbeddings",
    "get_embedding_provider",
    "l2_normalize",
]
