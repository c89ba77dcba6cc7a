"""
OpenInference Auto-Instrumentation

Registers the OpenAI instrumentor so chat-completion and embedding
calls made through the openai client are traced without code changes.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

_instrumented = False


def register_instrumentors() -> bool:
    """
    Register OpenInference auto-instrumentors.

    Call once at startup, before any LLM calls.

    Returns:
        True if the instrumentor was registered, False otherwise
    """
    global _instrumented
    if _instrumented:
        return True

    try:
        from openinference.instrumentation.openai import OpenAIInstrumentor
    except ImportError:
        logger.debug("OpenAI instrumentor not available")
        return False

    try:
        OpenAIInstrumentor().instrument()
    except Exception as e:
        logger.warning("Failed to instrument OpenAI: %s", e)
        return False

    logger.info("Registered instrumentors: openai")
    _instrumented = True
    return True

