"""Tests for the in-memory knowledge store."""

import json
import threading

import pytest

from docwatch.knowledge import (
    ChunkMetadata,
    ContentType,
    EmbeddingDimensionError,
    KnowledgeBaseNotFoundError,
    KnowledgeStore,
    SnapshotCorruptError,
)
from conftest import fake_embed


def code(source: str) -> ChunkMetadata:
    return ChunkMetadata(source=source, type=ContentType.CODE)


def docs(source: str) -> ChunkMetadata:
    return ChunkMetadata(source=source, type=ContentType.DOCUMENTATION)


class TestAppend:
    """Tests for KnowledgeStore.append."""

    def test_append_embeds_and_keeps_order(self, store):
        store.append("first chunk", code("a.ts"))
        store.append("second chunk", docs("b.md"))

        assert len(store) == 2
        assert [c.source for c in store.chunks] == ["a.ts", "b.md"]
        assert store.chunks[0].embedding == fake_embed("first chunk")
        assert store.dimension == len(fake_embed("x"))

    def test_append_never_deduplicates(self, store):
        store.append("same", code("a.ts"))
        store.append("same", code("a.ts"))
        assert len(store) == 2

    def test_mismatched_dimension_is_rejected(self):
        vectors = iter([[1.0, 0.0], [1.0, 0.0, 0.0]])
        store = KnowledgeStore(lambda text: next(vectors))
        store.append("one", code("a.ts"))

        with pytest.raises(EmbeddingDimensionError):
            store.append("two", code("b.ts"))
        assert len(store) == 1

    def test_embedding_failure_propagates_and_leaves_store_unchanged(self):
        def failing(text):
            raise ConnectionError("embedding service down")

        store = KnowledgeStore(failing)
        with pytest.raises(ConnectionError):
            store.append("text", code("a.ts"))
        assert store.is_empty()

    def test_concurrent_appends_are_all_kept(self, store):
        def worker(n):
            for i in range(25):
                store.append(f"worker {n} chunk {i}", code(f"w{n}.ts"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(store) == 100


class TestSearch:
    """Tests for similarity search."""

    @pytest.fixture
    def populated(self, store):
        store.append("parse webhook payload signature", code("src/webhook.ts"))
        store.append("render documentation page markdown", docs("docs/guide.md"))
        store.append("open pull request branch commit", code("src/github.ts"))
        store.append("webhook setup guide for users", docs("docs/webhooks.md"))
        return store

    def test_identical_query_ranks_first_with_unit_similarity(self, populated):
        query = fake_embed("open pull request branch commit")

        results = populated.search_with_scores(query, top_k=4)

        assert results[0][0].source == "src/github.ts"
        assert results[0][1] == pytest.approx(1.0)

    def test_results_are_sorted_descending(self, populated):
        results = populated.search_with_scores(fake_embed("webhook guide"), top_k=4)
        scores = [score for _, score in results]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.parametrize("top_k", [0, 1, 2, 3, 10])
    def test_never_returns_more_than_top_k(self, populated, top_k):
        results = populated.search(fake_embed("webhook"), top_k=top_k)
        assert len(results) == min(top_k, len(populated))

    def test_type_filter_is_honored(self, populated):
        results = populated.search(fake_embed("webhook guide"), top_k=10, type_filter=ContentType.DOCUMENTATION)
        assert results
        assert all(chunk.metadata.type == ContentType.DOCUMENTATION for chunk in results)

    def test_type_filter_accepts_string_values(self, populated):
        results = populated.search(fake_embed("webhook"), top_k=10, type_filter="code")
        assert {chunk.source for chunk in results} == {"src/webhook.ts", "src/github.ts"}

    def test_untrusted_metadata_rederives_type_from_source(self, store):
        # Stored as documentation but the source is a TypeScript file
        store.append("mislabelled code", docs("src/mislabelled.ts (part 1/2)"))

        trusted = store.search(fake_embed("mislabelled code"), 5, type_filter=ContentType.CODE)
        rederived = store.search(
            fake_embed("mislabelled code"), 5, type_filter=ContentType.CODE, trust_metadata=False
        )

        assert trusted == []
        assert [c.source for c in rederived] == ["src/mislabelled.ts (part 1/2)"]

    def test_ties_keep_insertion_order(self, store):
        for name in ("one.ts", "two.ts", "three.ts"):
            store.append("identical content", code(name))

        results = store.search(fake_embed("identical content"), 3)

        assert [c.source for c in results] == ["one.ts", "two.ts", "three.ts"]

    def test_empty_store_returns_nothing(self, store):
        assert store.search(fake_embed("anything"), 5) == []


class TestRemoveSource:
    """Tests for removing a file's chunks."""

    def test_removes_all_parts_of_a_file(self, store):
        store.append("part one", code("src/big.ts (part 1/2)"))
        store.append("part two", code("src/big.ts (part 2/2)"))
        store.append("other", code("src/other.ts"))

        removed = store.remove_source("src/big.ts")

        assert removed == 2
        assert [c.source for c in store.chunks] == ["src/other.ts"]

    def test_removing_everything_resets_dimension(self, store):
        store.append("only", code("a.ts"))
        store.remove_source("a.ts")
        assert store.dimension is None


class TestReplaceSource:
    """Tests for swapping a file's chunks."""

    def test_swaps_old_parts_for_new_chunks(self, store):
        store.append("old one", code("src/big.ts (part 1/2)"))
        store.append("other", code("src/other.ts"))
        store.append("old two", code("src/big.ts (part 2/2)"))
        new_chunk = store.embed_chunk("new", code("src/big.ts"))

        removed = store.replace_source("src/big.ts", [new_chunk])

        assert removed == 2
        assert [c.content for c in store.chunks] == ["other", "new"]

    def test_embed_chunk_does_not_modify_store(self, store):
        chunk = store.embed_chunk("text", code("a.ts"))

        assert chunk.embedding == fake_embed("text")
        assert store.is_empty()

    def test_mismatched_dimension_leaves_store_unchanged(self, store):
        store.append("old", code("a.ts"))
        store.append("other", code("b.ts"))
        wrong = KnowledgeStore(lambda text: [1.0, 0.0]).embed_chunk("new", code("a.ts"))

        with pytest.raises(EmbeddingDimensionError):
            store.replace_source("a.ts", [wrong])
        assert [c.content for c in store.chunks] == ["old", "other"]

    def test_replacing_the_only_file_adopts_new_dimension(self, store):
        store.append("old", code("a.ts"))
        chunk = KnowledgeStore(lambda text: [1.0, 0.0]).embed_chunk("new", code("a.ts"))

        store.replace_source("a.ts", [chunk])

        assert store.dimension == 2


class TestClear:
    """Tests for KnowledgeStore.clear."""

    def test_clear_drops_chunks_and_dimension(self, store):
        store.append("one", code("a.ts"))
        store.append("two", docs("b.md"))

        store.clear()

        assert store.is_empty()
        assert store.dimension is None
        store.append("three", code("c.ts"))
        assert len(store) == 1


class TestPersistence:
    """Tests for JSON snapshots."""

    def test_round_trip_preserves_chunks(self, store, tmp_path):
        store.append("alpha beta", code("src/a.ts"))
        store.append("gamma delta", docs("docs/b.md"))
        path = tmp_path / "kb" / "knowledge.json"

        assert store.persist(path) is True

        restored = KnowledgeStore(fake_embed)
        restored.restore(path)

        assert len(restored) == len(store)
        for original, loaded in zip(store.chunks, restored.chunks):
            assert loaded.content == original.content
            assert loaded.metadata == original.metadata
            assert loaded.embedding == pytest.approx(original.embedding, abs=1e-6)
        assert restored.dimension == store.dimension

    def test_snapshot_format(self, store, tmp_path):
        store.append("alpha", code("src/a.ts"))
        path = tmp_path / "knowledge.json"
        store.persist(path)

        data = json.loads(path.read_text())

        assert data["version"] == 1
        assert data["dimension"] == store.dimension
        assert data["chunks"][0]["metadata"] == {"source": "src/a.ts", "type": "code"}

    def test_empty_store_does_not_overwrite_snapshot(self, store, tmp_path):
        path = tmp_path / "knowledge.json"
        path.write_text("[]")

        assert store.persist(path) is False
        assert path.read_text() == "[]"

    def test_persist_leaves_no_temporary_files(self, store, tmp_path):
        store.append("alpha", code("src/a.ts"))
        store.persist(tmp_path / "knowledge.json")
        assert [p.name for p in tmp_path.iterdir()] == ["knowledge.json"]

    def test_restore_accepts_bare_list(self, tmp_path):
        path = tmp_path / "legacy.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "content": "legacy",
                        "embedding": [0.5, 0.5],
                        "metadata": {"source": "old.js", "type": "code"},
                    }
                ]
            )
        )

        store = KnowledgeStore(fake_embed)
        store.restore(path)

        assert store.chunks[0].source == "old.js"
        assert store.dimension == 2

    def test_restore_maps_unknown_type_to_other(self, tmp_path):
        path = tmp_path / "kb.json"
        path.write_text(
            json.dumps(
                {"chunks": [{"content": "x", "embedding": [1.0], "metadata": {"source": "x.bin", "type": "binary"}}]}
            )
        )

        store = KnowledgeStore(fake_embed)
        store.restore(path)

        assert store.chunks[0].metadata.type == ContentType.OTHER

    def test_restore_missing_file_raises_not_found(self, store, tmp_path):
        with pytest.raises(KnowledgeBaseNotFoundError):
            store.restore(tmp_path / "missing.json")

    @pytest.mark.parametrize(
        "payload",
        [
            "{not json",
            json.dumps({"chunks": "nope"}),
            json.dumps([{"content": "x"}]),
            json.dumps(
                [
                    {"content": "a", "embedding": [1.0], "metadata": {"source": "a.ts"}},
                    {"content": "b", "embedding": [1.0, 2.0], "metadata": {"source": "b.ts"}},
                ]
            ),
        ],
    )
    def test_restore_corrupt_snapshot_raises(self, store, tmp_path, payload):
        path = tmp_path / "kb.json"
        path.write_text(payload)

        with pytest.raises(SnapshotCorruptError):
            store.restore(path)

    def test_failed_restore_keeps_existing_chunks(self, store, tmp_path):
        store.append("kept", code("a.ts"))
        path = tmp_path / "kb.json"
        path.write_text("{not json")

        with pytest.raises(SnapshotCorruptError):
            store.restore(path)
        assert len(store) == 1


class TestStats:
    """Tests for store statistics."""

    def test_counts_by_type(self, store):
        store.append("a", code("a.ts"))
        store.append("b", code("b.ts"))
        store.append("c", docs("c.md"))

        stats = store.stats()

        assert stats["chunks"] == 3
        assert stats["by_type"] == {"code": 2, "documentation": 1}
        assert stats["dimension"] == store.dimension
