"""
Shared test fixtures.

KeywordEmbeddings maps texts to hand-picked axes so tests can reason
about exact similarity scores without loading a model.
"""

from __future__ import annotations

import numpy as np
import pytest

from jarvis_rag.config import reset_config
from jarvis_rag.core.exceptions import ModelUnavailable
from jarvis_rag.embeddings import l2_normalize
from jarvis_rag.observability import reset_tracer
from jarvis_rag.observability.config import reset_config as reset_phoenix_config


class KeywordEmbeddings:
    """
    Deterministic embeddings: the first keyword found in the text picks
    the vector. Unmatched text gets `default`.

    Set `fail_with` to an exception to make every embed() call raise it.
    """

    def __init__(self, vectors: dict[str, list[float]], default: list[float]):
        self._vectors = {k: l2_normalize(v) for k, v in vectors.items()}
        self._default = l2_normalize(default)
        self.calls: list[str] = []
        self.fail_with: Exception | None = None

    @property
    def dimensions(self) -> int:
        return self._default.shape[0]

    def embed(self, text: str) -> np.ndarray:
        self.calls.append(text)
        if self.fail_with is not None:
            raise self.fail_with
        lowered = text.lower()
        for keyword, vector in self._vectors.items():
            if keyword in lowered:
                return vector.copy()
        return self._default.copy()

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        return [self.embed(t) for t in texts]


@pytest.fixture
def keyword_embeddings() -> KeywordEmbeddings:
    """Three orthogonal topics: network, plants, everything else."""
    return KeywordEmbeddings(
        {
            "wifi": [1.0, 0.0, 0.0],
            "router": [1.0, 0.0, 0.0],
            "plant": [0.0, 1.0, 0.0],
            "water": [0.0, 1.0, 0.0],
        },
        default=[0.0, 0.0, 1.0],
    )


@pytest.fixture
def model_down() -> ModelUnavailable:
    return ModelUnavailable("embedding model failed to load")


@pytest.fixture(autouse=True)
def reset_globals(monkeypatch):
    """Isolate tests from the developer's environment and each other."""
    for var in (
        "PHOENIX_ENABLED",
        "PHOENIX_CAPTURE_LLM_CONTENT",
        "JARVIS_EMBEDDING_BACKEND",
        "JARVIS_EMBEDDING_MODEL",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    reset_phoenix_config()
    reset_tracer()
    yield
    reset_config()
    reset_phoenix_config()
    reset_tracer()
