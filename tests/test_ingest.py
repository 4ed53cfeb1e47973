"""Tests for full-repository ingestion."""

from unittest.mock import patch

import pytest

from docwatch.knowledge import (
    ContentType,
    DocumentIngestError,
    IngestOptions,
    KnowledgeStore,
    RepositoryIngestor,
    add_document,
)
from conftest import fake_embed


class TestRepositoryIngestor:
    """Tests for RepositoryIngestor.ingest."""

    def test_skips_excluded_directories(self, store, make_repo):
        root = make_repo(
            {
                "a.ts": "export const a = 1; // padded to fifty characters.",
                "b.md": "# Title\n\nSome documentation text padded to fifty.",
                "node_modules/c.ts": "export const c = 3;",
            }
        )

        stats = RepositoryIngestor(store).ingest(root)

        assert len(store) == 2
        assert stats.files == 2
        assert stats.chunks == 2
        assert stats.by_type == {"code": 1, "documentation": 1}
        assert {c.source for c in store.chunks} == {"a.ts", "b.md"}

    def test_version_control_directory_is_never_walked(self, store, make_repo):
        root = make_repo({".git/config.json": "{}", "index.py": "print('hi')"})

        stats = RepositoryIngestor(store).ingest(root)

        assert stats.files == 1
        assert [c.source for c in store.chunks] == ["index.py"]

    def test_unrecognized_extensions_are_ignored(self, store, make_repo):
        root = make_repo({"logo.png": "binary", "notes.txt": "text", "app.js": "run();"})

        stats = RepositoryIngestor(store).ingest(root)

        assert stats.files == 1
        assert stats.skipped == 0

    def test_walk_order_is_depth_first_and_sorted(self, store, make_repo):
        root = make_repo(
            {
                "z.ts": "z",
                "lib/b.ts": "b",
                "lib/a.ts": "a",
                "docs/intro.md": "intro",
            }
        )

        RepositoryIngestor(store).ingest(root)

        assert [c.source for c in store.chunks] == ["z.ts", "docs/intro.md", "lib/a.ts", "lib/b.ts"]

    def test_path_exclusions_are_counted_as_skipped(self, store, make_repo):
        root = make_repo(
            {
                "src/index.ts": "export {}",
                "src/generated/api.ts": "export {}",
                "src/generated/readme.md": "generated",
            }
        )
        options = IngestOptions(exclude_paths=["generated/"])

        stats = RepositoryIngestor(store, options).ingest(root)

        assert stats.files == 1
        assert stats.skipped == 2
        assert [c.source for c in store.chunks] == ["src/index.ts"]

    def test_large_files_are_split_into_labelled_parts(self, store, make_repo):
        body = "\n".join(f"export function handler{i}() {{ return {i}; }}" for i in range(40))
        root = make_repo({"src/handlers.ts": body})

        stats = RepositoryIngestor(store, IngestOptions(max_chunk_size=500)).ingest(root)

        sources = [c.source for c in store.chunks]
        assert stats.files == 1
        assert stats.chunks == len(sources) > 1
        assert sources[0] == f"src/handlers.ts (part 1/{len(sources)})"
        assert all(c.metadata.type == ContentType.CODE for c in store.chunks)
        assert all(len(c.content) <= 500 for c in store.chunks)

    def test_one_failing_file_does_not_stop_the_walk(self, make_repo):
        def embed(text):
            if "explode" in text:
                raise ConnectionError("embedding failed")
            return fake_embed(text)

        store = KnowledgeStore(embed)
        root = make_repo({"a.ts": "fine", "b.ts": "explode", "c.ts": "also fine"})

        stats = RepositoryIngestor(store).ingest(root)

        assert stats.files == 2
        assert stats.errors == 1
        assert [c.source for c in store.chunks] == ["a.ts", "c.ts"]

    def test_partial_file_failure_counts_appended_chunks(self, make_repo):
        def embed(text):
            if "handler3" in text:
                raise ConnectionError("embedding failed")
            return fake_embed(text)

        store = KnowledgeStore(embed)
        body = "\n".join(f"export function handler{i}() {{ return {i}; }}" for i in range(6))
        root = make_repo({"src/handlers.ts": body})

        stats = RepositoryIngestor(store, IngestOptions(max_chunk_size=60)).ingest(root)

        assert stats.errors == 1
        assert stats.files == 0
        assert stats.chunks == len(store) == 3

    def test_parallel_ingest_matches_sequential(self, make_repo):
        files = {f"src/module{i}.py": f"def function_{i}():\n    return {i}\n" for i in range(12)}
        root = make_repo(files)

        sequential = KnowledgeStore(fake_embed)
        RepositoryIngestor(sequential).ingest(root)
        parallel = KnowledgeStore(fake_embed)
        stats = RepositoryIngestor(parallel, IngestOptions(workers=4)).ingest(root)

        assert stats.files == 12
        assert {c.source for c in parallel.chunks} == {c.source for c in sequential.chunks}

    def test_missing_root_raises(self, store, tmp_path):
        with pytest.raises(FileNotFoundError):
            RepositoryIngestor(store).ingest(tmp_path / "missing")

    def test_does_not_persist(self, store, make_repo, tmp_path):
        root = make_repo({"a.ts": "a"})
        with patch.object(KnowledgeStore, "persist") as mock_persist:
            RepositoryIngestor(store).ingest(root)
        mock_persist.assert_not_called()


class TestAddDocument:
    """Tests for add_document."""

    def test_small_document_keeps_plain_source(self, store):
        assert add_document(store, "docs/guide.mdx", "# Guide", 100) == 1
        chunk = store.chunks[0]
        assert chunk.source == "docs/guide.mdx"
        assert chunk.metadata.type == ContentType.DOCUMENTATION

    def test_error_carries_appended_count(self):
        calls = []

        def embed(text):
            calls.append(text)
            if len(calls) == 2:
                raise RuntimeError("boom")
            return fake_embed(text)

        store = KnowledgeStore(embed)
        content = "line one is here\nline two is here\nline three here"

        with pytest.raises(DocumentIngestError) as exc_info:
            add_document(store, "notes.md", content, 20)

        assert exc_info.value.appended == 1
        assert exc_info.value.source == "notes.md"
        assert len(store) == 1
