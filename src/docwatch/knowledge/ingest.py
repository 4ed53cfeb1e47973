"""Full-repository ingestion into the knowledge base."""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from docwatch.constants import EXCLUDED_DIRECTORIES
from docwatch.knowledge.chunking import chunk_text
from docwatch.knowledge.config import IngestOptions
from docwatch.knowledge.errors import DocumentIngestError
from docwatch.knowledge.models import ChunkMetadata, ContentType, IngestStats
from docwatch.knowledge.store import KnowledgeStore
from docwatch.knowledge.utils import (
    classify_content_type,
    is_path_excluded,
    is_recognized_file,
    part_source,
)

logger = logging.getLogger(__name__)


@dataclass
class FileResult:
    """Outcome of ingesting a single file."""

    path: str
    content_type: ContentType
    size: int
    chunks: int


def read_text_file(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def add_document(
    store: KnowledgeStore,
    rel_path: str,
    content: str,
    max_chunk_size: int,
    replace: bool = False,
) -> int:
    """Append one file's content to ``store``, chunking it when it is too large.

    Small files are stored whole with ``source = rel_path``; larger files are
    split and each part is labelled ``"<rel_path> (part i/N)"``.

    With ``replace`` every part is embedded first and the file's earlier
    chunks are swapped out only once all of them succeeded, so a failure
    leaves the store untouched.

    Returns:
        int: Number of chunks appended

    Raises:
        DocumentIngestError: If embedding any part fails; carries the parts already appended
    """
    content_type = classify_content_type(rel_path)

    if len(content) > max_chunk_size:
        parts = chunk_text(content, max_chunk_size)
        logger.debug(f"🔢 Split {rel_path} into {len(parts)} chunks")
        sources = [part_source(rel_path, i, len(parts)) for i in range(len(parts))]
    else:
        parts = [content]
        sources = [rel_path]

    if replace:
        try:
            chunks = [
                store.embed_chunk(part, ChunkMetadata(source=source, type=content_type))
                for part, source in zip(parts, sources)
            ]
            store.replace_source(rel_path, chunks)
        except Exception as e:
            raise DocumentIngestError(rel_path, 0, e) from e
        return len(chunks)

    appended = 0
    for part, source in zip(parts, sources):
        try:
            store.append(part, ChunkMetadata(source=source, type=content_type))
        except Exception as e:
            raise DocumentIngestError(rel_path, appended, e) from e
        appended += 1

    return appended


class RepositoryIngestor:
    """Walks a repository working tree and feeds every recognised file into a store."""

    def __init__(self, store: KnowledgeStore, options: IngestOptions | None = None) -> None:
        self.store = store
        self.options = options or IngestOptions()

    def discover_files(self, root: Path) -> tuple[list[str], int]:
        """List ingestible files under ``root`` depth-first.

        Excluded directories are pruned by exact name. Path-substring
        exclusions are applied before the extension filter.

        Returns:
            Tuple of (relative POSIX paths in walk order, count skipped by exclusions)
        """
        files: list[str] = []
        skipped = 0

        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDED_DIRECTORIES)
            rel_dir = Path(dirpath).relative_to(root)

            for filename in sorted(filenames):
                rel_path = (rel_dir / filename).as_posix()
                if is_path_excluded(rel_path, self.options.exclude_paths):
                    logger.debug(f"⏭️ Skipping excluded file: {rel_path}")
                    skipped += 1
                    continue
                if not is_recognized_file(rel_path):
                    continue
                files.append(rel_path)

        return files, skipped

    def _ingest_one(self, root: Path, rel_path: str) -> FileResult:
        try:
            content = read_text_file(root / rel_path)
        except OSError as e:
            raise DocumentIngestError(rel_path, 0, e) from e

        chunks = add_document(self.store, rel_path, content, self.options.max_chunk_size)
        return FileResult(
            path=rel_path,
            content_type=classify_content_type(rel_path),
            size=len(content),
            chunks=chunks,
        )

    def _ingest_safely(self, root: Path, rel_path: str) -> FileResult | DocumentIngestError:
        try:
            return self._ingest_one(root, rel_path)
        except DocumentIngestError as e:
            return e

    def ingest(self, root: str | os.PathLike) -> IngestStats:
        """Ingest every recognised file under ``root`` into the store.

        A failure on one file is logged and counted; the walk always
        continues. The store is not persisted here.

        Args:
            root: Repository working tree

        Returns:
            IngestStats: Aggregate counters for the pass

        Raises:
            FileNotFoundError: If ``root`` is not a directory
        """
        root_path = Path(root)
        if not root_path.is_dir():
            raise FileNotFoundError(f"Repository path not found: {root_path}")

        files, skipped = self.discover_files(root_path)
        stats = IngestStats(skipped=skipped)
        logger.info(f"🔄 Ingesting {len(files)} files from {root_path}")

        if self.options.workers > 1:
            with ThreadPoolExecutor(max_workers=self.options.workers) as pool:
                results = list(pool.map(lambda rel: self._ingest_safely(root_path, rel), files))
        else:
            results = [self._ingest_safely(root_path, rel) for rel in files]

        for result in results:
            if isinstance(result, DocumentIngestError):
                logger.error(f"❌ {result}")
                stats.errors += 1
                stats.chunks += result.appended
            else:
                stats.record_file(result.content_type, result.size, result.chunks)

        logger.info(
            f"✅ Ingested {stats.files} files into {stats.chunks} chunks "
            f"({stats.errors} errors, {stats.skipped} skipped)"
        )
        return stats
