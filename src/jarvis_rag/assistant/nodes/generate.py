"""
Generation node - sends the augmented prompt to the chat model.

Prompt assembly is delegated to the pure functions in
assistant.prompts; this node only wires state to the client.
Chat failures propagate as ChatCompletionError.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

from jarvis_rag.assistant.prompts import DEFAULT_HISTORY_TURNS, build_messages

if TYPE_CHECKING:
    from jarvis_rag.assistant.state import RagState
    from jarvis_rag.core.protocols import ChatClient

logger = logging.getLogger(__name__)


def create_generate_node(
    client: ChatClient,
    history_turns: int = DEFAULT_HISTORY_TURNS,
) -> Callable[[RagState], dict]:
    """
    Factory that creates a generation node with an injectable chat client.

    Args:
        client: ChatClient implementation (OpenAIChatClient or a mock)
        history_turns: Prior turns kept in the prompt

    Returns:
        A node function compatible with LangGraph
    """

    def generate_response(state: RagState) -> dict:
        """
        Reads from state:
        - query, history, context

        Writes to state:
        - messages: exactly what was sent to the model
        - response: the model's reply, uninterpreted
        - generation_latency_ms
        """
        start = time.time()

        messages = build_messages(
            state["query"],
            history=state["history"],
            context=state["context"],
            history_turns=history_turns,
        )
        logger.debug(
            "Prompt has %d messages (context: %s)", len(messages), bool(state["context"])
        )

        response = client.complete(messages)

        return {
            "messages": messages,
            "response": response,
            "generation_latency_ms": (time.time() - start) * 1000,
        }

    return generate_response
