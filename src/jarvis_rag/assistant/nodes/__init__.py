"""
LangGraph nodes for retrieval-augmented chat.

Nodes with dependencies use the factory pattern:
create_X_node(deps) -> node_fn
"""

from jarvis_rag.assistant.nodes.retrieve import create_retrieve_node
from jarvis_rag.assistant.nodes.generate import create_generate_node

__all__ = [
    "create_retrieve_node",
    "create_generate_node",
]
