"""
jarvis-rag: retrieval-augmented chat over a private document set.

Text is embedded into unit-norm vectors, held in an in-memory store,
ranked by cosine similarity against each query, and the best passages
are spliced into the prompt sent to an OpenAI-compatible chat model.
"""

__version__ = "0.1.0"
