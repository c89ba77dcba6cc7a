"""
Semantic Conventions for Span Attributes

Attribute keys following OpenTelemetry GenAI conventions plus a
custom `rag.` namespace for knowledge-base operations.

Reference: https://opentelemetry.io/docs/specs/semconv/gen-ai/
"""

# ---------------------------------------------------------------------------
# GENAI NAMESPACE (OTel standard)
# ---------------------------------------------------------------------------

GEN_AI_SYSTEM = "gen_ai.system"  # "openai", "lm_studio"
GEN_AI_REQUEST_MODEL = "gen_ai.request.model"
GEN_AI_REQUEST_TEMPERATURE = "gen_ai.request.temperature"
GEN_AI_REQUEST_MAX_TOKENS = "gen_ai.request.max_tokens"

GEN_AI_USAGE_INPUT_TOKENS = "gen_ai.usage.input_tokens"
GEN_AI_USAGE_OUTPUT_TOKENS = "gen_ai.usage.output_tokens"

# Only set when PHOENIX_CAPTURE_LLM_CONTENT is on
GEN_AI_PROMPT = "gen_ai.prompt"
GEN_AI_COMPLETION = "gen_ai.completion"


# ---------------------------------------------------------------------------
# RAG NAMESPACE (custom)
# ---------------------------------------------------------------------------

RAG_DOCUMENT_ID = "rag.document.id"
RAG_DOCUMENT_DELETED = "rag.document.deleted"
RAG_STORE_SIZE = "rag.store.size"

RAG_RETRIEVAL_LIMIT = "rag.retrieval.limit"
RAG_RETRIEVAL_THRESHOLD = "rag.retrieval.threshold"
RAG_RETRIEVAL_DOC_COUNT = "rag.retrieval.doc_count"
RAG_RETRIEVAL_DOC_IDS = "rag.retrieval.doc_ids"
RAG_RETRIEVAL_TOP_SCORE = "rag.retrieval.top_score"
RAG_RETRIEVAL_OUTCOME = "rag.retrieval.outcome"  # see outcomes below
RAG_RETRIEVAL_ERROR = "rag.retrieval.error"

# Retrieval outcomes. "empty" and "degraded" both hand back [] to the
# caller; only telemetry tells them apart.
OUTCOME_HITS = "hits"
OUTCOME_EMPTY = "empty"
OUTCOME_DEGRADED = "degraded"


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def retrieval_attributes(
    outcome: str,
    limit: int,
    threshold: float,
    store_size: int,
    doc_ids: list[str] | None = None,
    top_score: float | None = None,
) -> dict:
    """Create attributes dict for a retrieval span."""
    attrs = {
        RAG_RETRIEVAL_OUTCOME: outcome,
        RAG_RETRIEVAL_LIMIT: limit,
        RAG_RETRIEVAL_THRESHOLD: threshold,
        RAG_STORE_SIZE: store_size,
        RAG_RETRIEVAL_DOC_COUNT: len(doc_ids or []),
    }
    if doc_ids:
        attrs[RAG_RETRIEVAL_DOC_IDS] = list(doc_ids)
    if top_score is not None:
        attrs[RAG_RETRIEVAL_TOP_SCORE] = top_score
    return attrs


def chat_request_attributes(
    system: str,
    model: str,
    temperature: float,
    max_tokens: int,
) -> dict:
    """Create attributes dict for a chat-completion span."""
    return {
        GEN_AI_SYSTEM: system,
        GEN_AI_REQUEST_MODEL: model,
        GEN_AI_REQUEST_TEMPERATURE: temperature,
        GEN_AI_REQUEST_MAX_TOKENS: max_tokens,
    }
