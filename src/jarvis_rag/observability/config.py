"""
Phoenix/OpenTelemetry Configuration

Loads observability settings from environment variables.
Supports graceful degradation when Phoenix is not installed.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass
class PhoenixConfig:
    """Configuration for Phoenix observability.

    Environment Variables:
        PHOENIX_ENABLED: Enable Phoenix tracing (default: false)
        PHOENIX_PROJECT_NAME: Project name in Phoenix UI (default: jarvis-rag)
        PHOENIX_COLLECTOR_ENDPOINT: Remote endpoint (optional, local if empty)
        PHOENIX_CAPTURE_LLM_CONTENT: Log prompts, replies and retrieved
            passages (default: false)

    PRIVACY WARNING:
        Setting PHOENIX_CAPTURE_LLM_CONTENT=true exports raw prompts and the
        private knowledge-base passages spliced into them. Keep it off unless
        the collector is trusted with that content.
    """

    enabled: bool = False
    project_name: str = "jarvis-rag"
    collector_endpoint: str | None = None
    capture_llm_content: bool = False

    @classmethod
    def from_env(cls) -> "PhoenixConfig":
        """Load config from environment variables."""
        return cls(
            enabled=_env_flag("PHOENIX_ENABLED"),
            project_name=os.environ.get("PHOENIX_PROJECT_NAME", "jarvis-rag"),
            collector_endpoint=os.environ.get("PHOENIX_COLLECTOR_ENDPOINT") or None,
            capture_llm_content=_env_flag("PHOENIX_CAPTURE_LLM_CONTENT"),
        )


# Global config singleton
_config: PhoenixConfig | None = None


def get_config() -> PhoenixConfig:
    """Get the global Phoenix config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = PhoenixConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None
