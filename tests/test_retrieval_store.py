"""
Unit Tests for the In-Memory Vector Store

Tests upsert/delete semantics, search, and the copy-on-write
concurrency guarantees.

PATTERNS:
---------
1. Keyword embeddings instead of a real model
2. Verify search behavior and ranking
3. Verify failures leave the store untouched
"""

import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import numpy as np
import pytest

from jarvis_rag.core.exceptions import DimensionMismatchError, ModelUnavailable
from jarvis_rag.core.protocols import VectorStore
from jarvis_rag.embeddings import MockEmbeddings
from jarvis_rag.retrieval.store import InMemoryVectorStore, get_vector_store


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture
def store(keyword_embeddings):
    return InMemoryVectorStore(keyword_embeddings)


@pytest.fixture
def store_with_docs(store):
    store.upsert("net-001", "Router Basics", "Reboot the router by unplugging it.")
    store.upsert("net-002", "Guest Wifi", "The guest wifi is Stark-Guest.")
    store.upsert("garden-001", "Plant Care", "Water the fig every 10 days.")
    return store


# ---------------------------------------------------------------------------
# UPSERT
# ---------------------------------------------------------------------------


class TestUpsert:

    def test_insert_document(self, store):
        store.upsert("d1", "Title", "Body")

        assert len(store) == 1
        assert "d1" in store
        assert store.get("d1").title == "Title"

    def test_embeds_title_and_content(self, store, keyword_embeddings):
        store.upsert("d1", "Title", "Body")
        assert keyword_embeddings.calls == ["Title\n\nBody"]

    def test_replace_law(self, store):
        """Second upsert of an id replaces the first; size is unchanged."""
        store.upsert("d1", "Title", "Body")
        store.upsert("other", "Other", "Other body")
        size_before = len(store)

        store.upsert("d1", "Title2", "Body2")

        entries = [d for d in store.list() if d.id == "d1"]
        assert len(entries) == 1
        assert entries[0].title == "Title2"
        assert store.get("d1").content == "Body2"
        assert len(store) == size_before

    def test_replace_moves_to_end(self, store):
        store.upsert("a", "A", "a")
        store.upsert("b", "B", "b")
        store.upsert("a", "A2", "a2")

        assert [d.id for d in store.snapshot_for_search()] == ["b", "a"]

    def test_replace_refreshes_created_at(self, keyword_embeddings):
        times = iter([
            datetime(2024, 1, 1, tzinfo=timezone.utc),
            datetime(2024, 1, 2, tzinfo=timezone.utc),
        ])
        store = InMemoryVectorStore(keyword_embeddings, clock=lambda: next(times))

        store.upsert("d1", "Title", "Body")
        store.upsert("d1", "Title2", "Body2")

        assert store.get("d1").created_at - datetime(2024, 1, 1, tzinfo=timezone.utc) == timedelta(days=1)

    def test_stored_embedding_is_unit_norm(self, store):
        store.upsert("d1", "Title", "Body")
        assert np.linalg.norm(store.get("d1").embedding) == pytest.approx(1.0)

    def test_embedding_failure_leaves_store_unchanged(self, store, keyword_embeddings, model_down):
        store.upsert("d1", "Title", "Body")
        keyword_embeddings.fail_with = model_down

        with pytest.raises(ModelUnavailable):
            store.upsert("d1", "New Title", "New Body")
        with pytest.raises(ModelUnavailable):
            store.upsert("d2", "Another", "Doc")

        assert len(store) == 1
        assert store.get("d1").title == "Title"

    def test_zero_vector_does_not_alias_provider_buffer(self):
        buffer = np.zeros(3, dtype=np.float32)
        embeddings = MagicMock()
        embeddings.embed.return_value = buffer
        store = InMemoryVectorStore(embeddings)

        store.upsert("z", "Zero", "Doc")
        buffer[0] = 1.0

        assert buffer.flags.writeable
        assert store.get("z").embedding.tolist() == [0.0, 0.0, 0.0]
        assert not store.get("z").embedding.flags.writeable

    def test_dimension_mismatch_rejected(self, store):
        store.upsert("d1", "Title", "Body")
        store._embeddings = MockEmbeddings(dimensions=8)

        with pytest.raises(DimensionMismatchError):
            store.upsert("d2", "Other", "Doc")

        assert len(store) == 1
        assert store.dimension == 3


# ---------------------------------------------------------------------------
# DELETE
# ---------------------------------------------------------------------------


class TestDelete:

    def test_delete_missing_returns_false(self, store_with_docs):
        size = len(store_with_docs)

        assert store_with_docs.delete("missing") is False
        assert len(store_with_docs) == size

    def test_delete_twice(self, store_with_docs):
        assert store_with_docs.delete("net-001") is True
        assert store_with_docs.delete("net-001") is False
        assert "net-001" not in store_with_docs

    def test_delete_keeps_order_of_others(self, store_with_docs):
        store_with_docs.delete("net-002")
        assert [d.id for d in store_with_docs.snapshot_for_search()] == ["net-001", "garden-001"]

    def test_clear(self, store_with_docs):
        store_with_docs.clear()
        assert len(store_with_docs) == 0
        assert store_with_docs.dimension is None


# ---------------------------------------------------------------------------
# LIST / SNAPSHOT
# ---------------------------------------------------------------------------


class TestListing:

    def test_list_is_lightweight(self, store_with_docs):
        entries = store_with_docs.list()

        assert [e.id for e in entries] == ["net-001", "net-002", "garden-001"]
        assert not hasattr(entries[0], "embedding")
        assert not hasattr(entries[0], "content")

    def test_snapshot_unaffected_by_later_writes(self, store_with_docs):
        snapshot = store_with_docs.snapshot_for_search()

        store_with_docs.delete("net-001")
        store_with_docs.upsert("new", "New", "Doc")

        assert [d.id for d in snapshot] == ["net-001", "net-002", "garden-001"]

    def test_stored_embeddings_read_only(self, store_with_docs):
        doc = store_with_docs.get("net-001")
        with pytest.raises(ValueError):
            doc.embedding[0] = 0.5


# ---------------------------------------------------------------------------
# SEARCH
# ---------------------------------------------------------------------------


class TestSearch:

    def test_relevant_docs_ranked_first(self, store_with_docs):
        results = store_with_docs.search("how do I fix the wifi?", limit=3, threshold=0.3)

        assert [r.id for r in results] == ["net-001", "net-002"]
        assert all(r.score == pytest.approx(1.0) for r in results)

    def test_search_respects_limit(self, store_with_docs):
        results = store_with_docs.search("router", limit=1)
        assert len(results) == 1

    def test_irrelevant_query_returns_empty(self, store_with_docs):
        assert store_with_docs.search("pasta recipe") == []

    def test_empty_store_skips_embedding(self, store, keyword_embeddings):
        assert store.search("anything", limit=5) == []
        assert keyword_embeddings.calls == []

    def test_search_error_propagates(self, store_with_docs, keyword_embeddings, model_down):
        keyword_embeddings.fail_with = model_down
        with pytest.raises(ModelUnavailable):
            store_with_docs.search("wifi")


# ---------------------------------------------------------------------------
# CONCURRENCY
# ---------------------------------------------------------------------------


class TestConcurrency:

    def test_replace_never_observed_as_delete_or_duplicate(self):
        store = InMemoryVectorStore(MockEmbeddings(dimensions=16))
        store.upsert("shared", "v0", "body")
        stop = threading.Event()
        errors: list[str] = []

        def writer(worker: int):
            for i in range(200):
                store.upsert("shared", f"v{worker}-{i}", "body")
                store.upsert(f"tmp-{worker}", "tmp", "body")
                store.delete(f"tmp-{worker}")

        def reader():
            while not stop.is_set():
                ids = [d.id for d in store.snapshot_for_search()]
                if "shared" not in ids:
                    errors.append("replace observed as delete")
                if len(ids) != len(set(ids)):
                    errors.append("duplicate id observed")

        readers = [threading.Thread(target=reader) for _ in range(3)]
        writers = [threading.Thread(target=writer, args=(w,)) for w in range(4)]
        for t in readers + writers:
            t.start()
        for t in writers:
            t.join()
        stop.set()
        for t in readers:
            t.join()

        assert errors == []
        assert [d.id for d in store.list()] == ["shared"]


# ---------------------------------------------------------------------------
# FACTORY / PROTOCOL
# ---------------------------------------------------------------------------


class TestFactoryAndProtocol:

    def test_get_vector_store_with_injected_embeddings(self, keyword_embeddings):
        store = get_vector_store(keyword_embeddings)
        assert isinstance(store, InMemoryVectorStore)

    def test_implements_protocol(self, store):
        assert isinstance(store, VectorStore)

    def test_instances_are_independent(self, keyword_embeddings):
        first = InMemoryVectorStore(keyword_embeddings)
        second = InMemoryVectorStore(keyword_embeddings)

        first.upsert("d1", "Title", "Body")

        assert len(second) == 0
