"""
CLI module - unified command-line interface.

Provides entry points for:
- Searching and listing an in-process knowledge base
- One-shot and interactive chat
- LLM endpoint health checks
"""

from jarvis_rag.cli.commands import (
    main,
    build_parser,
    run_search,
    run_stats,
    run_ask,
    run_chat,
    run_health,
)

__all__ = [
    "main",
    "build_parser",
    "run_search",
    "run_stats",
    "run_ask",
    "run_chat",
    "run_health",
]
