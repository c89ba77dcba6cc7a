"""
Observability Module - Phoenix + OpenTelemetry Integration

Traces knowledge-base operations and chat completions using Arize
Phoenix with OpenInference auto-instrumentation.

USAGE:
------
# At application startup:
from jarvis_rag.observability import init_phoenix

init_phoenix()  # Starts local Phoenix UI if PHOENIX_ENABLED=true

# In code that needs tracing:
from jarvis_rag.observability import get_tracer

tracer = get_tracer()
with tracer.start_span("my_operation", attributes={"key": "value"}) as span:
    span.set_attribute("result", "success")
"""

from __future__ import annotations

import logging

from jarvis_rag.observability.config import (
    PhoenixConfig,
    get_config,
    reset_config,
)
from jarvis_rag.observability.tracer import (
    TracerProtocol,
    SpanProtocol,
    NoOpTracer,
    NoOpSpan,
    RecordingTracer,
    RecordedSpan,
    get_tracer,
    reset_tracer,
)
from jarvis_rag.observability.attributes import (
    GEN_AI_REQUEST_MODEL,
    RAG_DOCUMENT_ID,
    RAG_RETRIEVAL_OUTCOME,
    RAG_RETRIEVAL_DOC_COUNT,
    OUTCOME_HITS,
    OUTCOME_EMPTY,
    OUTCOME_DEGRADED,
    retrieval_attributes,
    chat_request_attributes,
)

logger = logging.getLogger(__name__)

_phoenix_initialized = False


def init_phoenix(config: PhoenixConfig | None = None) -> bool:
    """
    Initialize Phoenix observability.

    Call once at application startup. Sets up the OpenTelemetry
    tracer provider and registers auto-instrumentors.

    Args:
        config: Optional config (uses env vars if not provided)

    Returns:
        True if Phoenix was initialized, False if disabled or failed
    """
    global _phoenix_initialized
    if _phoenix_initialized:
        return True

    config = config or get_config()

    if not config.enabled:
        logger.debug("Phoenix observability disabled")
        return False

    try:
        import phoenix as px
        from phoenix.otel import register
    except ImportError as e:
        logger.warning("Phoenix not installed, observability disabled: %s", e)
        return False

    try:
        # Remote Phoenix if an endpoint is set, otherwise a local UI
        if config.collector_endpoint:
            logger.info("Phoenix connecting to remote: %s", config.collector_endpoint)
        else:
            session = px.launch_app()
            logger.info("Phoenix UI available at: %s", session.url)

        register(
            project_name=config.project_name,
            endpoint=config.collector_endpoint,
            set_global_tracer_provider=True,
        )
    except Exception as e:
        logger.error("Failed to initialize Phoenix: %s", e)
        return False

    from jarvis_rag.observability.instrumentation import register_instrumentors

    register_instrumentors()
    reset_tracer()
    _phoenix_initialized = True
    return True


def shutdown_phoenix() -> None:
    """Flush spans and reset tracer state."""
    global _phoenix_initialized

    if not _phoenix_initialized:
        return

    from opentelemetry import trace

    provider = trace.get_tracer_provider()
    if hasattr(provider, "shutdown"):
        provider.shutdown()

    reset_tracer()
    reset_config()
    _phoenix_initialized = False


__all__ = [
    # Initialization
    "init_phoenix",
    "shutdown_phoenix",
    # Config
    "PhoenixConfig",
    "get_config",
    "reset_config",
    # Tracer
    "TracerProtocol",
    "SpanProtocol",
    "NoOpTracer",
    "NoOpSpan",
    "RecordingTracer",
    "RecordedSpan",
    "get_tracer",
    "reset_tracer",
    # Attributes
    "GEN_AI_REQUEST_MODEL",
    "RAG_DOCUMENT_ID",
    "RAG_RETRIEVAL_OUTCOME",
    "RAG_RETRIEVAL_DOC_COUNT",
    "OUTCOME_HITS",
    "OUTCOME_EMPTY",
    "OUTCOME_DEGRADED",
    "retrieval_attributes",
    "chat_request_attributes",
]
