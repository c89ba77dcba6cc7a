"""
Unit Tests for the RAG Assistant

Tests nodes in isolation, then the compiled graph through
RagAssistant. The chat client is always a MagicMock; retrieval uses a
real knowledge base over keyword embeddings.

PATTERNS:
---------
1. Nodes are pure functions of state + injected deps
2. Inspect the exact messages handed to the chat client
3. Retrieval failure must never stop an answer
"""

from unittest.mock import MagicMock

import pytest

from jarvis_rag.assistant import ChatReply, RagAssistant, create_initial_state
from jarvis_rag.assistant.nodes import create_generate_node, create_retrieve_node
from jarvis_rag.assistant.prompts import SYSTEM_PROMPT
from jarvis_rag.config import RagConfig
from jarvis_rag.core.exceptions import ChatCompletionError, ValidationError
from jarvis_rag.observability import OUTCOME_DEGRADED, RecordingTracer
from jarvis_rag.observability.attributes import RAG_RETRIEVAL_OUTCOME
from jarvis_rag.retrieval import InMemoryVectorStore, KnowledgeBase


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture
def tracer():
    return RecordingTracer()


@pytest.fixture
def kb(keyword_embeddings, tracer):
    kb = KnowledgeBase(InMemoryVectorStore(keyword_embeddings), tracer=tracer)
    kb.add_document("doc_wifi", "Home Wi-Fi", "SSID is Stark-Guest. Reboot the router if slow.")
    kb.add_document("doc_plants", "Plant Care", "Water the fern on Mondays.")
    return kb


@pytest.fixture
def chat_client():
    client = MagicMock()
    client.complete.return_value = "Certainly, sir."
    return client


@pytest.fixture
def assistant(kb, chat_client):
    return RagAssistant(kb, chat_client)


def sent_messages(chat_client) -> list[dict]:
    return chat_client.complete.call_args.args[0]


# ---------------------------------------------------------------------------
# NODES
# ---------------------------------------------------------------------------


class TestRetrieveNode:

    def test_populates_docs_and_context(self, kb):
        node = create_retrieve_node(kb)

        update = node(create_initial_state("how do I reset the wifi?"))

        assert [d["id"] for d in update["retrieved_docs"]] == ["doc_wifi"]
        assert "[Document 1: Home Wi-Fi]" in update["context"]
        assert update["retrieval_latency_ms"] >= 0

    def test_nothing_relevant(self, kb):
        update = create_retrieve_node(kb)(create_initial_state("tell me a joke"))

        assert update["retrieved_docs"] == []
        assert update["context"] == ""

    def test_passes_limit(self):
        kb = MagicMock()
        kb.search_documents.return_value = []

        create_retrieve_node(kb, limit=2)(create_initial_state("q"))

        kb.search_documents.assert_called_once_with("q", limit=2)


class TestGenerateNode:

    def test_builds_messages_and_calls_client(self, chat_client):
        node = create_generate_node(chat_client)
        state = create_initial_state("hello", [{"role": "user", "content": "earlier"}])

        update = node(state)

        assert update["response"] == "Certainly, sir."
        assert update["messages"] == [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": "earlier"},
            {"role": "user", "content": "hello"},
        ]
        chat_client.complete.assert_called_once_with(update["messages"])

    def test_client_error_propagates(self, chat_client):
        chat_client.complete.side_effect = ChatCompletionError("refused")

        with pytest.raises(ChatCompletionError):
            create_generate_node(chat_client)(create_initial_state("hello"))


# ---------------------------------------------------------------------------
# ASSISTANT
# ---------------------------------------------------------------------------


class TestRagAssistant:

    def test_grounded_answer(self, assistant, chat_client):
        reply = assistant.ask("What's the wifi name?")

        assert isinstance(reply, ChatReply)
        assert reply.response == "Certainly, sir."
        assert reply.grounded
        assert [s["id"] for s in reply.sources] == ["doc_wifi"]

        system = sent_messages(chat_client)[0]["content"]
        assert "Relevant information from knowledge base" in system
        assert "SSID is Stark-Guest" in system

    def test_ungrounded_answer(self, assistant, chat_client):
        reply = assistant.ask("Tell me a joke")

        assert not reply.grounded
        assert sent_messages(chat_client)[0]["content"] == SYSTEM_PROMPT

    def test_degraded_retrieval_still_answers(self, assistant, chat_client, keyword_embeddings, model_down, tracer):
        keyword_embeddings.fail_with = model_down

        reply = assistant.ask("What's the wifi name?")

        assert reply.response == "Certainly, sir."
        assert reply.sources == []
        assert sent_messages(chat_client)[0]["content"] == SYSTEM_PROMPT
        assert tracer.find("knowledge_base.search")[-1].attributes[RAG_RETRIEVAL_OUTCOME] == OUTCOME_DEGRADED

    def test_chat_failure_propagates(self, assistant, chat_client):
        chat_client.complete.side_effect = ChatCompletionError("LM Studio not running")

        with pytest.raises(ChatCompletionError):
            assistant.ask("hello")

    def test_history_truncated_to_last_five(self, assistant, chat_client):
        history = [
            {"role": "user" if i % 2 == 0 else "assistant", "content": f"turn {i}"}
            for i in range(9)
        ]

        assistant.ask("latest", history)

        messages = sent_messages(chat_client)
        assert [m["content"] for m in messages[1:-1]] == [f"turn {i}" for i in range(4, 9)]
        assert messages[-1] == {"role": "user", "content": "latest"}

    def test_blank_message_rejected(self, assistant, chat_client):
        with pytest.raises(ValidationError) as exc_info:
            assistant.ask("   ")

        assert exc_info.value.field == "message"
        chat_client.complete.assert_not_called()

    @pytest.mark.parametrize("message", [None, 42, ["hi"]])
    def test_non_string_message_rejected(self, assistant, chat_client, message):
        with pytest.raises(ValidationError) as exc_info:
            assistant.ask(message)

        assert exc_info.value.field == "message"
        chat_client.complete.assert_not_called()

    def test_malformed_history_rejected(self, assistant, chat_client):
        with pytest.raises(ValidationError):
            assistant.ask("hello", [{"role": "robot", "content": "beep"}])

        chat_client.complete.assert_not_called()

    def test_chat_returns_text(self, assistant):
        assert assistant.chat("hello") == "Certainly, sir."

    def test_from_config(self, chat_client):
        config = RagConfig(embedding_backend="mock", history_turns=2)

        assistant = RagAssistant.from_config(config, client=chat_client)

        assert assistant.history_turns == 2
        assert assistant.client is chat_client
