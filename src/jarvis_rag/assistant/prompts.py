"""
Prompt construction for retrieval-augmented chat.

Everything here is a PURE FUNCTION: same inputs, same output, no
LLM or store access. Tests exercise the exact prompt text without
any mocks.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from jarvis_rag.schemas.chat import ChatMessage

DEFAULT_HISTORY_TURNS = 5

SYSTEM_PROMPT = (
    "You are JARVIS, a helpful and intelligent AI assistant. "
    "Provide clear, concise, and helpful responses."
)

CONTEXT_INSTRUCTION = (
    "\n\nIMPORTANT: Use the following information from the knowledge base to "
    "answer the user's question. If the information is relevant, reference it "
    "in your answer. If it's not relevant, you can provide a general response."
)

CONTEXT_HEADER = "\n\nRelevant information from knowledge base:\n"


def _as_mapping(doc: Any) -> Mapping[str, Any]:
    return doc.to_dict() if hasattr(doc, "to_dict") else doc


def build_context(documents: Sequence[Any]) -> str:
    """
    Render ranked documents as a labeled context block.

    Accepts DocumentResult objects or dicts with title/content keys.
    Returns "" when there is nothing to add; callers treat that as
    "answer from general knowledge".
    """
    if not documents:
        return ""

    sections = [CONTEXT_HEADER]
    for n, doc in enumerate(documents, start=1):
        doc = _as_mapping(doc)
        sections.append(f"\n[Document {n}: {doc['title']}]\n{doc['content']}\n")
    return "".join(sections)


def build_system_message(context: str = "") -> str:
    """Fixed preamble, plus the knowledge-base instruction and block when context is present."""
    if not context:
        return SYSTEM_PROMPT
    return SYSTEM_PROMPT + CONTEXT_INSTRUCTION + context


def truncate_history(
    history: Sequence[Any],
    turns: int = DEFAULT_HISTORY_TURNS,
) -> list[dict[str, str]]:
    """Keep only the most recent `turns` prior messages. Older ones are dropped."""
    if turns <= 0 or not history:
        return []
    recent = list(history)[-turns:]
    return [
        {"role": turn.role, "content": turn.content}
        if isinstance(turn, ChatMessage)
        else {"role": turn["role"], "content": turn["content"]}
        for turn in recent
    ]


def build_messages(
    user_message: str,
    history: Sequence[Any] | None = None,
    context: str = "",
    history_turns: int = DEFAULT_HISTORY_TURNS,
) -> list[dict[str, str]]:
    """
    Assemble the message list for the chat-completion service.

    Layout: [system, *last N history turns, user]
    """
    return [
        {"role": "system", "content": build_system_message(context)},
        *truncate_history(history or [], history_turns),
        {"role": "user", "content": user_message},
    ]
