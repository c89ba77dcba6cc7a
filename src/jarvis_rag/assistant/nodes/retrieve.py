"""
Retrieval node - fetches relevant documents from the knowledge base.

This node is TESTABLE IN ISOLATION because:
1. KnowledgeBase is injected, not global
2. No side effects beyond state updates
3. Never raises for retrieval failures (the knowledge base fails open)
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable

from jarvis_rag.assistant.prompts import build_context

if TYPE_CHECKING:
    from jarvis_rag.assistant.state import RagState
    from jarvis_rag.retrieval.knowledge_base import KnowledgeBase


def create_retrieve_node(
    kb: KnowledgeBase,
    limit: int | None = None,
) -> Callable[[RagState], dict]:
    """
    Factory that creates a retrieval node with an injected knowledge base.

    Args:
        kb: Knowledge base to search
        limit: Documents per query (knowledge base default if None)

    Returns:
        A node function compatible with LangGraph
    """

    def retrieve_context(state: RagState) -> dict:
        """
        Reads from state:
        - query

        Writes to state:
        - retrieved_docs: ranked documents as dicts
        - context: formatted context block ("" if nothing relevant)
        - retrieval_latency_ms
        """
        start = time.time()

        docs = kb.search_documents(state["query"], limit=limit)
        retrieved = [doc.to_dict() for doc in docs]

        return {
            "retrieved_docs": retrieved,
            "context": build_context(retrieved),
            "retrieval_latency_ms": (time.time() - start) * 1000,
        }

    return retrieve_context
