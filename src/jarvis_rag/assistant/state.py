"""
Assistant state definition - the data flowing through the LangGraph.

Each node reads from and writes to specific keys.
"""

from typing import TypedDict


class RagState(TypedDict):
    """
    State that flows through the RAG graph.

    Input fields are set at invocation time.
    Intermediate fields are populated by nodes.
    Output fields contain the final result.
    """

    # -------------------------------------------------------------------------
    # INPUT (set at invocation)
    # -------------------------------------------------------------------------
    query: str
    history: list[dict]

    # -------------------------------------------------------------------------
    # INTERMEDIATE (populated by nodes)
    # -------------------------------------------------------------------------
    retrieved_docs: list[dict]
    context: str
    messages: list[dict]

    # -------------------------------------------------------------------------
    # OUTPUT (final result)
    # -------------------------------------------------------------------------
    response: str | None

    # -------------------------------------------------------------------------
    # METRICS
    # -------------------------------------------------------------------------
    retrieval_latency_ms: float
    generation_latency_ms: float


def create_initial_state(query: str, history: list[dict] | None = None) -> RagState:
    """Create an initial state for graph invocation."""
    return RagState(
        query=query,
        history=history or [],
        retrieved_docs=[],
        context="",
        messages=[],
        response=None,
        retrieval_latency_ms=0,
        generation_latency_ms=0,
    )
