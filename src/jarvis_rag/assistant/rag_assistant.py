"""
RAG assistant - the chat entry point for the surrounding application.

Flow: validate -> retrieve (fail-open) -> build prompt -> chat model.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from jarvis_rag.assistant.graph import build_rag_graph
from jarvis_rag.assistant.llm_client import OpenAIChatClient
from jarvis_rag.assistant.prompts import DEFAULT_HISTORY_TURNS
from jarvis_rag.assistant.state import create_initial_state
from jarvis_rag.config import RagConfig, get_config
from jarvis_rag.core.protocols import ChatClient
from jarvis_rag.retrieval.knowledge_base import KnowledgeBase
from jarvis_rag.schemas.chat import parse_history, parse_message

logger = logging.getLogger(__name__)


@dataclass
class ChatReply:
    """Model reply plus the documents that grounded it."""
    response: str
    sources: list[dict] = field(default_factory=list)
    retrieval_latency_ms: float = 0.0
    generation_latency_ms: float = 0.0

    @property
    def grounded(self) -> bool:
        return bool(self.sources)


class RagAssistant:
    """
    Answers user messages with knowledge-base context when available.

    The graph is compiled once per assistant; knowledge base and
    chat client are injected.
    """

    def __init__(
        self,
        kb: KnowledgeBase,
        client: ChatClient,
        history_turns: int = DEFAULT_HISTORY_TURNS,
    ):
        self.kb = kb
        self.client = client
        self.history_turns = history_turns
        self._graph = build_rag_graph(kb, client, history_turns=history_turns)

    @classmethod
    def from_config(
        cls,
        config: RagConfig | None = None,
        kb: KnowledgeBase | None = None,
        client: ChatClient | None = None,
    ) -> "RagAssistant":
        config = config or get_config()
        return cls(
            kb=kb or KnowledgeBase.from_config(config),
            client=client or OpenAIChatClient.from_config(config),
            history_turns=config.history_turns,
        )

    def ask(self, message: str, history: list[Any] | None = None) -> ChatReply:
        """
        Answer `message` given prior turns.

        Raises:
            ValidationError: message missing/blank or a history turn is malformed
            ChatCompletionError: the chat model failed
        """
        message = parse_message(message)
        turns = [turn.model_dump() for turn in parse_history(history)]

        logger.info("User message: %s", message)
        final = self._graph.invoke(create_initial_state(message, turns))

        return ChatReply(
            response=final["response"],
            sources=final["retrieved_docs"],
            retrieval_latency_ms=final["retrieval_latency_ms"],
            generation_latency_ms=final["generation_latency_ms"],
        )

    def chat(self, message: str, history: list[Any] | None = None) -> str:
        """Answer `message` and return only the reply text."""
        return self.ask(message, history).response
