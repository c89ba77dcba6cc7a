"""
Exception taxonomy for the RAG core.

Write paths fail closed: these propagate out of add_document.
Read paths fail open: KnowledgeBase.search_documents catches them
and degrades to an empty result.
"""


class RagError(Exception):
    """Base class for all errors raised by jarvis_rag."""


class ModelUnavailable(RagError):
    """The embedding model failed to load or failed during inference.

    Fatal to the current call only. The next call retries the load.
    """


class ValidationError(RagError):
    """A required field (id, title, content, query) was missing or blank."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"{field} is required")


class DimensionMismatchError(RagError):
    """An embedding's length differs from the store's fixed dimension."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Embedding dimension {actual} does not match store dimension {expected}"
        )


class ChatCompletionError(RagError):
    """The chat-completion service was unreachable or returned a bad response.

    Unrelated to retrieval: a failed search never raises this.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
