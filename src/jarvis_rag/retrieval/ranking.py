"""
Similarity ranking - exact top-K scan over stored embeddings.

Stored and query vectors are unit-norm, so cosine similarity is a
single matrix-vector product. O(N·D) per query, no index structure.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from jarvis_rag.core.exceptions import DimensionMismatchError
from jarvis_rag.core.protocols import DocumentResult
from jarvis_rag.retrieval.document import Document

DEFAULT_LIMIT = 3
DEFAULT_THRESHOLD = 0.3


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine similarity for vectors of any magnitude. Zero vectors score 0.0."""
    denom = float(np.linalg.norm(a) * np.linalg.norm(b))
    if denom == 0.0:
        return 0.0
    return float(np.dot(a, b) / denom)


def score_documents(
    query_embedding: np.ndarray,
    documents: Sequence[Document],
) -> np.ndarray:
    """
    Score every document against the query.

    Returns an array aligned with `documents`, each value in [-1, 1].
    """
    query = np.asarray(query_embedding, dtype=np.float32).reshape(-1)
    if not documents:
        return np.empty(0, dtype=np.float32)

    matrix = np.vstack([doc.embedding for doc in documents])
    if matrix.shape[1] != query.shape[0]:
        raise DimensionMismatchError(expected=matrix.shape[1], actual=query.shape[0])

    # Rounding can push unit-vector dot products a hair past 1.0
    return np.clip(matrix @ query, -1.0, 1.0)


def rank_documents(
    query_embedding: np.ndarray,
    documents: Sequence[Document],
    k: int = DEFAULT_LIMIT,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[DocumentResult]:
    """
    Return at most k documents scoring strictly above threshold.

    Results are sorted by descending score. Equal scores keep the
    order of `documents` (insertion order for a store snapshot).

    Args:
        query_embedding: Unit-norm query vector
        documents: Candidates, typically a store snapshot
        k: Maximum number of results
        threshold: Relevance floor; scores at or below it are dropped

    Returns:
        Ranked DocumentResult list, possibly empty
    """
    if k <= 0 or not documents:
        return []

    scores = score_documents(query_embedding, documents)
    order = np.argsort(-scores, kind="stable")

    results: list[DocumentResult] = []
    for idx in order:
        score = float(scores[idx])
        if not score > threshold:
            break
        results.append(documents[idx].to_result(score))
        if len(results) == k:
            break

    return results
