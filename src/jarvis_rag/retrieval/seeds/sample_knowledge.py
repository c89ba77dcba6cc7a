"""
Built-in sample documents for demos and smoke tests.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from jarvis_rag.schemas.chat import DocumentInput

if TYPE_CHECKING:
    from jarvis_rag.retrieval.knowledge_base import KnowledgeBase

logger = logging.getLogger(__name__)


def get_sample_documents() -> list[DocumentInput]:
    """
    A handful of personal-assistant notes covering distinct topics,
    so retrieval demos have something to separate.
    """
    return [
        DocumentInput(
            id="doc_wifi",
            title="Home Wi-Fi Setup",
            content="""The home network SSID is "Stark-Guest" for visitors.
The router sits in the hallway closet. To reboot it, unplug the power
for 30 seconds. The admin page is at 192.168.1.1 and firmware updates
are applied automatically every Sunday at 3am.""",
        ),
        DocumentInput(
            id="doc_plants",
            title="Plant Watering Schedule",
            content="""Water the fiddle-leaf fig every 10 days, only when the top
two inches of soil are dry. The snake plant needs water roughly once a
month. Herbs on the kitchen windowsill (basil, mint) need water every
other day in summer.""",
        ),
        DocumentInput(
            id="doc_car",
            title="Car Maintenance Log",
            content="""Oil change due every 8,000 km with 5W-30 synthetic oil.
Last service: tyres rotated and brake pads checked. Next inspection is
due in March. Tyre pressure should be 2.3 bar front and 2.1 bar rear.""",
        ),
        DocumentInput(
            id="doc_recipes",
            title="Favourite Pasta Recipe",
            content="""Cook 200g spaghetti in salted water. Meanwhile fry two
cloves of garlic in olive oil with chilli flakes, add the drained pasta
with a ladle of cooking water, then finish with parsley and lemon zest.""",
        ),
    ]


def seed_knowledge_base(
    kb: KnowledgeBase,
    documents: Iterable[DocumentInput] | None = None,
) -> int:
    """
    Add documents to a knowledge base.

    Args:
        kb: Target knowledge base
        documents: Documents to add (defaults to the built-in samples)

    Returns:
        Number of documents added
    """
    docs = list(documents) if documents is not None else get_sample_documents()
    for doc in docs:
        kb.add_document(doc.id, doc.title, doc.content)
    logger.info("Seeded knowledge base with %d documents", len(docs))
    return len(docs)
