"""
Assistant module - retrieval-augmented chat.

USAGE:
------
from jarvis_rag.assistant import RagAssistant

assistant = RagAssistant.from_config()
reply = assistant.chat("When is the car's next oil change?")
"""

from jarvis_rag.assistant.prompts import (
    SYSTEM_PROMPT,
    build_context,
    build_messages,
    build_system_message,
    truncate_history,
)
from jarvis_rag.assistant.llm_client import OpenAIChatClient
from jarvis_rag.assistant.state import RagState, create_initial_state
from jarvis_rag.assistant.graph import build_rag_graph
from jarvis_rag.assistant.rag_assistant import ChatReply, RagAssistant

__all__ = [
    # Prompts
    "SYSTEM_PROMPT",
    "build_context",
    "build_messages",
    "build_system_message",
    "truncate_history",
    # Client
    "OpenAIChatClient",
    # Graph
    "RagState",
    "create_initial_state",
    "build_rag_graph",
    # Entry point
    "ChatReply",
    "RagAssistant",
]
