"""
Load knowledge-base documents from a directory of text notes.

Each *.md or *.txt file becomes one document:
- id: the file stem
- title: first non-empty line, leading '#' marks stripped
- content: everything after the title line
"""

from __future__ import annotations

import logging
from pathlib import Path

from jarvis_rag.schemas.chat import DocumentInput

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".md", ".txt")


def parse_note(path: Path) -> DocumentInput | None:
    """Parse one note file. Returns None for files with no body text."""
    lines = path.read_text(encoding="utf-8").splitlines()

    title = None
    body_start = 0
    for i, line in enumerate(lines):
        if line.strip():
            title = line.strip().lstrip("#").strip()
            body_start = i + 1
            break

    content = "\n".join(lines[body_start:]).strip()
    if not title or not content:
        logger.warning("Skipping %s: needs a title line and body text", path)
        return None

    return DocumentInput(id=path.stem, title=title, content=content)


def load_documents_from_dir(directory: str | Path) -> list[DocumentInput]:
    """
    Read every supported note in `directory` (not recursive), sorted by name.

    Raises:
        NotADirectoryError: if `directory` is not a directory
    """
    root = Path(directory)
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    documents = []
    for path in sorted(root.iterdir()):
        if path.suffix.lower() not in SUPPORTED_SUFFIXES or not path.is_file():
            continue
        doc = parse_note(path)
        if doc is not None:
            documents.append(doc)

    logger.info("Loaded %d documents from %s", len(documents), root)
    return documents
