"""
Embeddings Module - Single Responsibility: Generate text embeddings.

It has ONE job: convert text to unit-norm vector embeddings.
No document handling, no ranking.

Every provider returns L2-normalized float32 vectors. The ranker
relies on that to score with a plain dot product.

MODEL LIFECYCLE:
----------------
Models are loaded lazily on the first embed() call, behind a lock.
Concurrent first callers wait for the same load instead of starting
their own. A failed load is not remembered, so the next call retries.
reset() drops the handle, and the following call loads again.
"""

from __future__ import annotations

import hashlib
import logging
import os
import threading
from typing import Any, Callable

import numpy as np

from jarvis_rag.core.exceptions import ModelUnavailable
from jarvis_rag.core.protocols import EmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_MODEL = "all-MiniLM-L6-v2"
DEFAULT_OPENAI_MODEL = "text-embedding-3-small"


def l2_normalize(vector: Any) -> np.ndarray:
    """Scale a vector to unit length. Zero vectors are returned unchanged."""
    arr = np.asarray(vector, dtype=np.float32).reshape(-1)
    norm = float(np.linalg.norm(arr))
    if norm == 0.0:
        return arr
    return arr / norm


def _load_sentence_transformer(model_name: str, device: str | None) -> Any:
    from sentence_transformers import SentenceTransformer

    return SentenceTransformer(model_name, device=device)


class SentenceTransformerEmbeddings:
    """
    Local embedding provider via sentence-transformers.

    Default model: all-MiniLM-L6-v2 (384 dimensions). Its pipeline
    mean-pools token embeddings; encode() then L2-normalizes.

    The loader is injectable so tests can count loads without
    downloading a model.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_LOCAL_MODEL,
        device: str | None = None,
        loader: Callable[[str, str | None], Any] | None = None,
    ):
        self.model_name = model_name
        self._device = device
        self._loader = loader or _load_sentence_transformer
        self._model: Any = None
        self._lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    @property
    def dimensions(self) -> int:
        return int(self._acquire().get_sentence_embedding_dimension())

    def _acquire(self) -> Any:
        model = self._model
        if model is not None:
            return model

        with self._lock:
            if self._model is None:
                logger.info("Loading embedding model: %s", self.model_name)
                try:
                    self._model = self._loader(self.model_name, self._device)
                except Exception as e:
                    logger.error("Failed to load embedding model %s: %s", self.model_name, e)
                    raise ModelUnavailable(
                        f"Embedding model {self.model_name!r} failed to load: {e}"
                    ) from e
                logger.info("Embedding model loaded: %s", self.model_name)
            return self._model

    def reset(self) -> None:
        """Drop the loaded model. The next embed() call loads it again."""
        with self._lock:
            self._model = None

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts in one forward pass."""
        if not texts:
            return []

        model = self._acquire()
        try:
            vectors = model.encode(
                texts,
                convert_to_numpy=True,
                normalize_embeddings=True,
                show_progress_bar=False,
            )
        except Exception as e:
            raise ModelUnavailable(f"Embedding inference failed: {e}") from e

        return [l2_normalize(v) for v in vectors]


class OpenAIEmbeddings:
    """
    OpenAI-based embedding provider.

    Uses text-embedding-3-small by default (1536 dimensions).
    The client is created on first use, under the same guard as
    the local model.
    """

    _MODEL_DIMS = {
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
        "text-embedding-ada-002": 1536,
    }

    def __init__(
        self,
        model: str = DEFAULT_OPENAI_MODEL,
        api_key: str | None = None,
        client: Any = None,
    ):
        self.model = model
        self._api_key = api_key
        self._client = client
        self._lock = threading.Lock()

    @property
    def dimensions(self) -> int:
        """Return embedding dimensions for the model."""
        return self._MODEL_DIMS.get(self.model, 1536)

    def _acquire(self) -> Any:
        client = self._client
        if client is not None:
            return client

        with self._lock:
            if self._client is None:
                try:
                    from openai import OpenAI

                    self._client = OpenAI(
                        api_key=self._api_key or os.environ.get("OPENAI_API_KEY")
                    )
                except Exception as e:
                    raise ModelUnavailable(f"OpenAI embeddings unavailable: {e}") from e
            return self._client

    def reset(self) -> None:
        with self._lock:
            self._client = None

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts efficiently."""
        if not texts:
            return []

        client = self._acquire()
        try:
            response = client.embeddings.create(input=texts, model=self.model)
        except Exception as e:
            raise ModelUnavailable(f"OpenAI embedding request failed: {e}") from e

        return [l2_normalize(item.embedding) for item in response.data]


class MockEmbeddings:
    """
    Mock embedding provider for testing without a model.

    Generates deterministic unit vectors seeded from the text hash.
    NOT for production use - only for testing/development.
    """

    def __init__(self, dimensions: int = 384):
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, text: str) -> np.ndarray:
        """Generate deterministic pseudo-embedding from text hash."""
        seed = int.from_bytes(hashlib.sha256(text.encode()).digest()[:8], "little")
        rng = np.random.default_rng(seed)
        return l2_normalize(rng.standard_normal(self._dimensions))

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts."""
        return [self.embed(text) for text in texts]


def get_embedding_provider(
    backend: str | None = None,
    model: str | None = None,
) -> EmbeddingProvider:
    """
    Factory function to get the appropriate embedding provider.

    Args:
        backend: "local", "openai" or "mock" (defaults to config)
        model: Model name override. None picks the backend's default
            (all-MiniLM-L6-v2 locally, text-embedding-3-small on OpenAI).
    """
    from jarvis_rag.config import get_config

    config = get_config()
    if backend is None:
        backend = config.embedding_backend
        model = model or config.embedding_model
    backend = backend.lower()

    if backend == "mock":
        return MockEmbeddings()
    if backend == "openai":
        return OpenAIEmbeddings(model=model or DEFAULT_OPENAI_MODEL)
    if backend == "local":
        return SentenceTransformerEmbeddings(model_name=model or DEFAULT_LOCAL_MODEL)
    raise ValueError(f"Unknown embedding backend: {backend!r}")
