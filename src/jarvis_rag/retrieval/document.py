"""
Document model for the retrieval system.

Single responsibility: Define the structure of records held by
the vector store.
"""

from dataclasses import dataclass
from datetime import datetime

import numpy as np

from jarvis_rag.core.protocols import DocumentResult, DocumentSummary


def embedding_text(title: str, content: str) -> str:
    """Text that gets embedded for a document."""
    return f"{title}\n\n{content}"


@dataclass(frozen=True)
class Document:
    """
    A stored document with its embedding.

    Records are never edited in place. Re-adding an id builds a new
    Document and swaps it in.
    """
    id: str
    title: str
    content: str
    embedding: np.ndarray
    created_at: datetime

    def summary(self) -> DocumentSummary:
        return DocumentSummary(id=self.id, title=self.title, created_at=self.created_at)

    def to_result(self, score: float) -> DocumentResult:
        return DocumentResult(
            id=self.id,
            title=self.title,
            content=self.content,
            score=score,
        )

