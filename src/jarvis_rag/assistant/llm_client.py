"""
Chat-completion client for any OpenAI-compatible endpoint.

Defaults target a local LM Studio server. The core treats the model
as a black box: request in, reply text out. Every failure mode
(transport, non-2xx, malformed body) comes back as ChatCompletionError,
never as a retrieval error.
"""

from __future__ import annotations

import logging
from typing import Any

import openai
from openai import OpenAI

from jarvis_rag.config import RagConfig, get_config
from jarvis_rag.core.exceptions import ChatCompletionError
from jarvis_rag.observability import get_tracer
from jarvis_rag.observability.attributes import (
    GEN_AI_COMPLETION,
    GEN_AI_PROMPT,
    GEN_AI_USAGE_INPUT_TOKENS,
    GEN_AI_USAGE_OUTPUT_TOKENS,
    chat_request_attributes,
)
from jarvis_rag.observability.config import get_config as get_phoenix_config
from jarvis_rag.observability.tracer import TracerProtocol

logger = logging.getLogger(__name__)


class OpenAIChatClient:
    """
    Chat-completion collaborator backed by the openai SDK.

    The underlying client is injectable so tests can pass a MagicMock.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:1234/v1",
        api_key: str = "lm-studio",
        model: str = "llama-2-7b-chat",
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 120.0,
        client: Any = None,
        tracer: TracerProtocol | None = None,
    ):
        self.base_url = base_url
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client or OpenAI(base_url=base_url, api_key=api_key, timeout=timeout)
        self._tracer = tracer

    @classmethod
    def from_config(cls, config: RagConfig | None = None) -> "OpenAIChatClient":
        config = config or get_config()
        return cls(
            base_url=config.llm_base_url,
            api_key=config.llm_api_key,
            model=config.llm_model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.request_timeout,
        )

    @property
    def tracer(self) -> TracerProtocol:
        return self._tracer or get_tracer()

    def complete(self, messages: list[dict[str, str]]) -> str:
        """
        Send messages and return the reply text verbatim.

        Raises:
            ChatCompletionError: endpoint unreachable, error status, or
                a response without choices[0].message.content
        """
        logger.info("Sending %d messages to %s (model %s)", len(messages), self.base_url, self.model)

        attrs = chat_request_attributes("openai", self.model, self.temperature, self.max_tokens)
        with self.tracer.start_span("chat_completion", attributes=attrs) as span:
            capture = get_phoenix_config().capture_llm_content
            if capture:
                span.set_attribute(GEN_AI_PROMPT, messages[-1]["content"])

            try:
                response = self._client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                    stream=False,
                )
            except openai.APIStatusError as e:
                logger.error("LLM returned status %s: %s", e.status_code, e.message)
                span.record_exception(e)
                span.set_status("error", e.message)
                raise ChatCompletionError(
                    f"Failed to get response from LLM: {e.message}", status_code=e.status_code
                ) from e
            except openai.APIError as e:
                logger.error("LLM request failed: %s", e)
                span.record_exception(e)
                span.set_status("error", str(e))
                raise ChatCompletionError(f"Failed to get response from LLM: {e}") from e

            content = _extract_content(response)

            usage = getattr(response, "usage", None)
            if usage is not None:
                span.set_attribute(GEN_AI_USAGE_INPUT_TOKENS, usage.prompt_tokens)
                span.set_attribute(GEN_AI_USAGE_OUTPUT_TOKENS, usage.completion_tokens)
            if capture:
                span.set_attribute(GEN_AI_COMPLETION, content)
            span.set_status("ok")

        return content

    def list_models(self) -> list[str]:
        """
        List model ids served by the endpoint. Used as a health check.

        Raises:
            ChatCompletionError: if the endpoint cannot be reached
        """
        try:
            page = self._client.models.list()
        except openai.APIError as e:
            raise ChatCompletionError(f"Cannot connect to LLM endpoint {self.base_url}: {e}") from e
        return [model.id for model in page.data]


def _extract_content(response: Any) -> str:
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as e:
        raise ChatCompletionError("Malformed chat-completion response: no choices") from e
    if not isinstance(content, str):
        raise ChatCompletionError("Malformed chat-completion response: no message content")
    return content
