"""
Runtime configuration for the RAG core.

Loads settings from environment variables. The CLI calls load_dotenv()
first, so a local .env file works too.
"""

import os
from dataclasses import dataclass


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    return float(raw) if raw else default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    return int(raw) if raw else default


@dataclass
class RagConfig:
    """Configuration for embeddings, retrieval policy and the LLM endpoint.

    Environment Variables:
        JARVIS_EMBEDDING_BACKEND: local | openai | mock (default: local)
        JARVIS_EMBEDDING_MODEL: Model override (default: the backend's own)
        JARVIS_LLM_BASE_URL: OpenAI-compatible endpoint (default: LM Studio)
        JARVIS_LLM_API_KEY: API key sent to the endpoint
        JARVIS_LLM_MODEL: Chat model name
        JARVIS_LLM_TEMPERATURE: Sampling temperature (default: 0.7)
        JARVIS_LLM_MAX_TOKENS: Reply token cap (default: 2000)
        JARVIS_LLM_TIMEOUT: Request timeout in seconds (default: 120)
        JARVIS_SEARCH_LIMIT: Documents spliced into each prompt (default: 3)
        JARVIS_SIMILARITY_THRESHOLD: Relevance floor (default: 0.3)
        JARVIS_HISTORY_TURNS: Prior turns kept in the prompt (default: 5)
    """

    embedding_backend: str = "local"
    embedding_model: str | None = None
    llm_base_url: str = "http://127.0.0.1:1234/v1"
    llm_api_key: str = "lm-studio"
    llm_model: str = "llama-2-7b-chat"
    temperature: float = 0.7
    max_tokens: int = 2000
    request_timeout: float = 120.0
    search_limit: int = 3
    similarity_threshold: float = 0.3
    history_turns: int = 5

    @classmethod
    def from_env(cls) -> "RagConfig":
        """Load config from environment variables."""
        return cls(
            embedding_backend=os.environ.get("JARVIS_EMBEDDING_BACKEND", "local").lower(),
            embedding_model=os.environ.get("JARVIS_EMBEDDING_MODEL") or None,
            llm_base_url=os.environ.get("JARVIS_LLM_BASE_URL", "http://127.0.0.1:1234/v1"),
            llm_api_key=os.environ.get("JARVIS_LLM_API_KEY", "lm-studio"),
            llm_model=os.environ.get("JARVIS_LLM_MODEL", "llama-2-7b-chat"),
            temperature=_env_float("JARVIS_LLM_TEMPERATURE", 0.7),
            max_tokens=_env_int("JARVIS_LLM_MAX_TOKENS", 2000),
            request_timeout=_env_float("JARVIS_LLM_TIMEOUT", 120.0),
            search_limit=_env_int("JARVIS_SEARCH_LIMIT", 3),
            similarity_threshold=_env_float("JARVIS_SIMILARITY_THRESHOLD", 0.3),
            history_turns=_env_int("JARVIS_HISTORY_TURNS", 5),
        )


# Global config singleton
_config: RagConfig | None = None


def get_config() -> RagConfig:
    """Get the global config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = RagConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None
