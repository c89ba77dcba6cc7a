"""
Graph construction with dependency injection.

The graph is just WIRING - all logic lives in nodes:
- Nodes can be tested in isolation
- Graph structure can change without touching node logic
- Dependencies are explicit and injectable
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from langgraph.graph import END, StateGraph

from jarvis_rag.assistant.nodes import create_generate_node, create_retrieve_node
from jarvis_rag.assistant.prompts import DEFAULT_HISTORY_TURNS
from jarvis_rag.assistant.state import RagState

if TYPE_CHECKING:
    from jarvis_rag.core.protocols import ChatClient
    from jarvis_rag.retrieval.knowledge_base import KnowledgeBase


def build_rag_graph(
    kb: KnowledgeBase,
    client: ChatClient,
    history_turns: int = DEFAULT_HISTORY_TURNS,
    limit: int | None = None,
) -> Any:
    """
    Build the RAG chat workflow with injected dependencies.

    Graph structure:
    START -> retrieve_context -> generate_response -> END

    Args:
        kb: Knowledge base for retrieval
        client: Chat-completion client
        history_turns: Prior turns kept in the prompt
        limit: Documents per query (knowledge base default if None)

    Returns:
        Compiled StateGraph ready for invocation

    Example:
        kb = KnowledgeBase(InMemoryVectorStore(MockEmbeddings()))
        graph = build_rag_graph(kb, OpenAIChatClient())
        final = graph.invoke(create_initial_state("What's the Wi-Fi name?"))
    """
    workflow = StateGraph(RagState)

    workflow.add_node("retrieve_context", create_retrieve_node(kb, limit=limit))
    workflow.add_node("generate_response", create_generate_node(client, history_turns))

    workflow.set_entry_point("retrieve_context")
    workflow.add_edge("retrieve_context", "generate_response")
    workflow.add_edge("generate_response", END)

    return workflow.compile()
