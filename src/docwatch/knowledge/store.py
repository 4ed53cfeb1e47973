"""In-memory vector store for document chunks with JSON snapshot persistence."""

import json
import logging
import os
import tempfile
import threading
from collections import Counter
from pathlib import Path
from typing import Any

from docwatch.constants import SNAPSHOT_FORMAT_VERSION
from docwatch.knowledge.errors import (
    EmbeddingDimensionError,
    KnowledgeBaseNotFoundError,
    SnapshotCorruptError,
)
from docwatch.knowledge.models import ChunkMetadata, ContentType, DocumentChunk
from docwatch.knowledge.utils import classify_content_type, cosine_similarity
from docwatch.llm.base import EmbedFn

logger = logging.getLogger(__name__)


class KnowledgeStore:
    """Ordered collection of embedded chunks for one monitored repository.

    The store owns no embedding model itself; it calls ``embed_fn`` for each
    appended chunk. All mutations hold a re-entrant lock so that webhook
    handlers and worker threads can share one instance. Embedding happens
    before the lock is taken, so a slow embedding call never blocks readers.
    """

    def __init__(self, embed_fn: EmbedFn) -> None:
        self._embed_fn = embed_fn
        self._chunks: list[DocumentChunk] = []
        self._dimension: int | None = None
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._chunks)

    @property
    def dimension(self) -> int | None:
        """Embedding length shared by every chunk, or None while empty."""
        return self._dimension

    @property
    def chunks(self) -> list[DocumentChunk]:
        """Snapshot copy of the stored chunks in insertion order."""
        with self._lock:
            return list(self._chunks)

    def is_empty(self) -> bool:
        return len(self) == 0

    def embed(self, text: str) -> list[float]:
        """Embed arbitrary text with the store's embedding function."""
        return self._embed_fn(text)

    def embed_chunk(self, content: str, metadata: ChunkMetadata) -> DocumentChunk:
        """Embed ``content`` into a chunk without adding it to the store."""
        embedding = [float(value) for value in self._embed_fn(content)]
        return DocumentChunk(content=content, embedding=embedding, metadata=metadata)

    @staticmethod
    def _check_dimension(chunk: DocumentChunk, dimension: int | None) -> None:
        if dimension is not None and len(chunk.embedding) != dimension:
            raise EmbeddingDimensionError(
                f"Embedding for {chunk.source} has {len(chunk.embedding)} dimensions, "
                f"store uses {dimension}"
            )

    def append(self, content: str, metadata: ChunkMetadata) -> DocumentChunk:
        """Embed ``content`` and append it as a new chunk.

        Never deduplicates: appending the same content twice stores it twice.

        Raises:
            EmbeddingDimensionError: If the embedding length differs from the store's
            Exception: Whatever the embedding function raises, unchanged
        """
        chunk = self.embed_chunk(content, metadata)

        with self._lock:
            self._check_dimension(chunk, self._dimension)
            if self._dimension is None:
                self._dimension = len(chunk.embedding)
            self._chunks.append(chunk)

        logger.debug(f"Appended chunk from {metadata.source} ({len(content)} chars)")
        return chunk

    def replace_source(self, source_path: str, chunks: list[DocumentChunk]) -> int:
        """Swap every chunk of ``source_path`` for already-embedded ``chunks`` in one step.

        Nothing changes if any new chunk has the wrong dimension.

        Returns:
            int: Number of chunks removed

        Raises:
            EmbeddingDimensionError: If the new chunks disagree with the remaining store
        """
        with self._lock:
            kept = [c for c in self._chunks if c.source_path != source_path]
            dimension = self._dimension if kept else None
            for chunk in chunks:
                self._check_dimension(chunk, dimension)
                if dimension is None:
                    dimension = len(chunk.embedding)

            removed = len(self._chunks) - len(kept)
            self._chunks = kept + list(chunks)
            self._dimension = dimension

        logger.debug(f"Replaced {removed} chunks of {source_path} with {len(chunks)}")
        return removed

    def clear(self) -> None:
        """Drop every chunk and forget the embedding dimension."""
        with self._lock:
            self._chunks = []
            self._dimension = None

    def remove_source(self, source_path: str) -> int:
        """Drop every chunk whose source path (part suffix ignored) equals ``source_path``.

        Returns:
            int: Number of chunks removed
        """
        return self.replace_source(source_path, [])

    def search_with_scores(
        self,
        query_embedding: list[float],
        top_k: int,
        type_filter: ContentType | str | None = None,
        trust_metadata: bool = True,
    ) -> list[tuple[DocumentChunk, float]]:
        """Rank stored chunks by cosine similarity to ``query_embedding``.

        Args:
            query_embedding: Vector to compare against
            top_k: Maximum number of results
            type_filter: Only consider chunks of this content type
            trust_metadata: If False, re-derive each chunk's type from its source path

        Returns:
            list of (chunk, score) pairs, best first; ties keep insertion order
        """
        if top_k <= 0:
            return []

        wanted = ContentType(type_filter) if type_filter is not None else None
        candidates = self.chunks

        if wanted is not None:
            if trust_metadata:
                candidates = [c for c in candidates if c.metadata.type == wanted]
            else:
                candidates = [c for c in candidates if classify_content_type(c.source_path) == wanted]

        if not candidates:
            return []

        scored = [(chunk, cosine_similarity(query_embedding, chunk.embedding)) for chunk in candidates]
        # sort() is stable, so equal scores stay in insertion order
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return scored[:top_k]

    def search(
        self,
        query_embedding: list[float],
        top_k: int,
        type_filter: ContentType | str | None = None,
        trust_metadata: bool = True,
    ) -> list[DocumentChunk]:
        """Return the ``top_k`` chunks most similar to ``query_embedding``."""
        return [
            chunk
            for chunk, _ in self.search_with_scores(query_embedding, top_k, type_filter, trust_metadata)
        ]

    def stats(self) -> dict[str, Any]:
        """Chunk counts by content type plus the embedding dimension."""
        with self._lock:
            by_type = Counter(chunk.metadata.type.value for chunk in self._chunks)
            return {
                "chunks": len(self._chunks),
                "dimension": self._dimension,
                "by_type": dict(by_type),
            }

    def persist(self, path: str | os.PathLike) -> bool:
        """Write the full chunk sequence to ``path`` as a JSON snapshot.

        The snapshot is written to a temporary file in the same directory and
        renamed over the target, so readers never see a partial file. An empty
        store is not written, which keeps any earlier snapshot intact.

        Returns:
            bool: True if a snapshot was written, False for an empty store
        """
        target = Path(path)

        with self._lock:
            if not self._chunks:
                logger.warning(f"⚠️ Knowledge base is empty, not overwriting {target}")
                return False

            snapshot = {
                "version": SNAPSHOT_FORMAT_VERSION,
                "dimension": self._dimension,
                "chunks": [chunk.to_dict() for chunk in self._chunks],
            }

            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(snapshot, handle)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, target)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise

            count = len(self._chunks)

        logger.info(f"💾 Saved knowledge base with {count} chunks to {target}")
        return True

    def restore(self, path: str | os.PathLike) -> None:
        """Replace the in-memory chunks with the snapshot at ``path``.

        Raises:
            KnowledgeBaseNotFoundError: If no snapshot exists at ``path``
            SnapshotCorruptError: If the snapshot cannot be parsed or is inconsistent
        """
        source = Path(path)
        if not source.is_file():
            raise KnowledgeBaseNotFoundError(f"No knowledge base snapshot at {source}")

        try:
            with open(source, encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SnapshotCorruptError(f"Could not read snapshot {source}: {e}") from e

        records = data.get("chunks") if isinstance(data, dict) else data
        if not isinstance(records, list):
            raise SnapshotCorruptError(f"Snapshot {source} has no chunk list")

        try:
            chunks = [DocumentChunk.from_dict(record) for record in records]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SnapshotCorruptError(f"Malformed chunk record in {source}: {e}") from e

        dimensions = {len(chunk.embedding) for chunk in chunks}
        if len(dimensions) > 1:
            raise SnapshotCorruptError(
                f"Snapshot {source} mixes embedding dimensions {sorted(dimensions)}"
            )

        with self._lock:
            self._chunks = chunks
            self._dimension = dimensions.pop() if dimensions else None

        logger.info(f"📂 Loaded knowledge base with {len(chunks)} chunks from {source}")
