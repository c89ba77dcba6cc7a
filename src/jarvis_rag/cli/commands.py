"""
CLI commands - entry points for the knowledge base and assistant.

Each command follows a consistent pattern:
1. Parse arguments
2. Load environment, configure logging
3. Build and seed an in-process knowledge base
4. Run the operation and print results
5. Return exit code

The store lives only as long as the process, so commands that need
documents take --docs DIR and/or --samples.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from jarvis_rag.config import get_config
from jarvis_rag.core.exceptions import ChatCompletionError, RagError


def _load_env() -> None:
    """Load environment variables from .env file."""
    from dotenv import load_dotenv

    load_dotenv()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_knowledge_base(args: argparse.Namespace):
    from jarvis_rag.retrieval import (
        KnowledgeBase,
        get_sample_documents,
        load_documents_from_dir,
        seed_knowledge_base,
    )

    kb = KnowledgeBase.from_config()
    if getattr(args, "samples", False):
        seed_knowledge_base(kb, get_sample_documents())
    if getattr(args, "docs", None):
        seed_knowledge_base(kb, load_documents_from_dir(args.docs))
    return kb


# ---------------------------------------------------------------------------
# COMMANDS
# ---------------------------------------------------------------------------


def run_search(args: argparse.Namespace) -> int:
    """Rank stored documents against a query."""
    kb = _build_knowledge_base(args)
    results = kb.search_documents(args.query, limit=args.limit)

    if args.json:
        print(json.dumps({"results": [r.to_dict() for r in results], "count": len(results)}, indent=2))
        return 0

    print(f"Found {len(results)} relevant documents (searched {len(kb.store)} total)")
    for n, result in enumerate(results, start=1):
        print(f"  {n}. [{result.score:.3f}] {result.title} ({result.id})")
    return 0


def run_stats(args: argparse.Namespace) -> int:
    """Print what the knowledge base holds."""
    kb = _build_knowledge_base(args)
    stats = kb.get_stats()

    if args.json:
        print(json.dumps(stats.to_dict(), indent=2))
        return 0

    print(f"Total documents: {stats.total_documents}")
    for doc in stats.documents:
        print(f"  - {doc.id}: {doc.title} ({doc.created_at.isoformat()})")
    return 0


def run_ask(args: argparse.Namespace) -> int:
    """Answer a single message."""
    from jarvis_rag.assistant import RagAssistant

    assistant = RagAssistant.from_config(kb=_build_knowledge_base(args))
    reply = assistant.ask(args.message)

    print(reply.response)
    if reply.sources:
        titles = ", ".join(doc["title"] for doc in reply.sources)
        print(f"\n(sources: {titles})")
    return 0


def run_chat(args: argparse.Namespace) -> int:
    """Interactive chat; history is kept for the session."""
    from jarvis_rag.assistant import RagAssistant

    assistant = RagAssistant.from_config(kb=_build_knowledge_base(args))
    history: list[dict] = []

    print("JARVIS ready. Empty line or Ctrl-D to exit.")
    while True:
        try:
            message = input("> ").strip()
        except EOFError:
            print()
            break
        if not message:
            break

        try:
            reply = assistant.chat(message, history)
        except ChatCompletionError as e:
            print(f"[error] {e}")
            continue

        print(reply)
        history.append({"role": "user", "content": message})
        history.append({"role": "assistant", "content": reply})

    return 0


def run_health(args: argparse.Namespace) -> int:
    """Check that the LLM endpoint answers."""
    from jarvis_rag.assistant import OpenAIChatClient

    config = get_config()
    client = OpenAIChatClient.from_config(config)
    try:
        models = client.list_models()
    except ChatCompletionError as e:
        print(f"Cannot connect to LLM at {config.llm_base_url}: {e}")
        print("Tip: make sure the LM Studio server is running.")
        return 1

    print(f"LLM connected at {config.llm_base_url}")
    for model in models:
        print(f"  - {model}")
    return 0


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jarvis-rag",
        description="Retrieval-augmented JARVIS assistant",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  jarvis-rag search "wifi password" --samples
  jarvis-rag ask "When is the oil change due?" --docs ./notes
  jarvis-rag chat --docs ./notes
  jarvis-rag health
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    seeded = argparse.ArgumentParser(add_help=False)
    seeded.add_argument("--docs", metavar="DIR", help="Load *.md/*.txt notes from DIR")
    seeded.add_argument("--samples", action="store_true", help="Load built-in sample documents")

    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", parents=[seeded], help="Semantic search")
    search.add_argument("query")
    search.add_argument("--limit", type=int, default=None)
    search.add_argument("--json", action="store_true")
    search.set_defaults(handler=run_search)

    stats = sub.add_parser("stats", parents=[seeded], help="List indexed documents")
    stats.add_argument("--json", action="store_true")
    stats.set_defaults(handler=run_stats)

    ask = sub.add_parser("ask", parents=[seeded], help="Answer one message")
    ask.add_argument("message")
    ask.set_defaults(handler=run_ask)

    chat = sub.add_parser("chat", parents=[seeded], help="Interactive chat")
    chat.set_defaults(handler=run_chat)

    health = sub.add_parser("health", help="Check LLM connectivity")
    health.set_defaults(handler=run_health)

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        jarvis-rag search QUERY   # Rank documents
        jarvis-rag stats          # List documents
        jarvis-rag ask MESSAGE    # One-shot answer
        jarvis-rag chat           # Interactive session
        jarvis-rag health         # LLM connectivity
    """
    _load_env()

    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    from jarvis_rag.observability import init_phoenix, shutdown_phoenix

    init_phoenix()

    try:
        return args.handler(args)
    except RagError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    finally:
        shutdown_phoenix()


if __name__ == "__main__":
    sys.exit(main())
