"""Incremental knowledge base updates driven by repository change events."""

import logging
import os
from pathlib import Path

from docwatch.knowledge.config import IngestOptions
from docwatch.knowledge.errors import DocumentIngestError
from docwatch.knowledge.ingest import add_document, read_text_file
from docwatch.knowledge.store import KnowledgeStore
from docwatch.knowledge.utils import is_path_excluded, is_recognized_file

logger = logging.getLogger(__name__)


class IncrementalUpdater:
    """Re-ingests only the files named by a push or merged pull request.

    By default new chunks are appended next to whatever the store already
    holds for the file. With ``replace_on_update`` the file's earlier chunks
    are swapped for the new ones once every part has been embedded; a file
    that fails to embed keeps its earlier chunks. Deleted files are always
    skipped and their chunks left in place.
    """

    def __init__(
        self,
        store: KnowledgeStore,
        repo_path: str | os.PathLike,
        options: IngestOptions | None = None,
    ) -> None:
        self.store = store
        self.repo_path = Path(repo_path)
        self.options = options or IngestOptions()

    def update(self, changed_paths: list[str]) -> bool:
        """Re-ingest the changed files into the store.

        Args:
            changed_paths: Repository-relative paths from the change event

        Returns:
            bool: True if at least one chunk was appended (the caller should persist)
        """
        return self.ingest_changes(changed_paths) > 0

    def ingest_changes(self, changed_paths: list[str]) -> int:
        """Re-ingest the changed files and return how many chunks were appended."""
        if not self.repo_path.exists():
            logger.warning(f"⚠️ Repository path not found at {self.repo_path}")
            return 0

        unique_paths = list(dict.fromkeys(p.replace("\\", "/").lstrip("/") for p in changed_paths))
        logger.info(f"🔄 Updating knowledge base with {len(unique_paths)} changed files...")

        appended = 0
        for rel_path in unique_paths:
            if is_path_excluded(rel_path, self.options.exclude_paths):
                logger.info(f"⏭️ Skipping excluded file: {rel_path}")
                continue

            full_path = self.repo_path / rel_path
            if not full_path.is_file():
                logger.debug(f"File no longer exists, keeping existing chunks: {rel_path}")
                continue

            if not is_recognized_file(rel_path):
                continue

            try:
                content = read_text_file(full_path)
            except OSError as e:
                logger.error(f"❌ Error reading changed file {rel_path}: {e}")
                continue

            logger.info(f"📄 Processing changed file: {rel_path}")
            try:
                appended += add_document(
                    self.store,
                    rel_path,
                    content,
                    self.options.max_chunk_size,
                    replace=self.options.replace_on_update,
                )
            except DocumentIngestError as e:
                logger.error(f"❌ Error processing changed file {rel_path}: {e}")
                appended += e.appended

        if appended:
            logger.info(f"✅ Appended {appended} chunks from changed files")
        return appended
