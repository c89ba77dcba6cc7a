"""
Core module - shared protocols, data classes and errors.

USAGE:
------
from jarvis_rag.core import VectorStore, EmbeddingProvider, ModelUnavailable
"""

from jarvis_rag.core.protocols import (
    # Protocols
    EmbeddingProvider,
    VectorStore,
    ChatClient,
    # Data classes
    DocumentResult,
    DocumentSummary,
    StoreStats,
)
from jarvis_rag.core.exceptions import (
    RagError,
    ModelUnavailable,
    ValidationError,
    DimensionMismatchError,
    ChatCompletionError,
)

__all__ = [
    # Protocols
    "EmbeddingProvider",
    "VectorStore",
    "ChatClient",
    # Data classes
    "DocumentResult",
    "DocumentSummary",
    "StoreStats",
    # Errors
    "RagError",
    "ModelUnavailable",
    "ValidationError",
    "DimensionMismatchError",
    "ChatCompletionError",
]
