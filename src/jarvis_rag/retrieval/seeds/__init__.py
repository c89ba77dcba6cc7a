"""
Seed data for the knowledge base.

The store is in-memory only, so every process starts empty. These
helpers fill it from built-in samples or from a directory of notes.
"""

from jarvis_rag.retrieval.seeds.sample_knowledge import (
    get_sample_documents,
    seed_knowledge_base,
)
from jarvis_rag.retrieval.seeds.loader import load_documents_from_dir

__all__ = [
    "get_sample_documents",
    "seed_knowledge_base",
    "load_documents_from_dir",
]
