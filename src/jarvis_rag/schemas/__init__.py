from jarvis_rag.schemas.chat import (
    ChatMessage,
    DocumentInput,
    SearchQuery,
    UserTurn,
    parse_document,
    parse_search,
    parse_message,
    parse_history,
)

__all__ = [
    "ChatMessage",
    "DocumentInput",
    "SearchQuery",
    "UserTurn",
    "parse_document",
    "parse_search",
    "parse_message",
    "parse_history",
]
