"""Load-or-build startup for the knowledge base."""

import logging
import os
from pathlib import Path

from docwatch.knowledge.errors import KnowledgeBaseNotFoundError, SnapshotCorruptError
from docwatch.knowledge.ingest import RepositoryIngestor

logger = logging.getLogger(__name__)


def initialize_knowledge_base(
    ingestor: RepositoryIngestor,
    repo_path: str | os.PathLike,
    kb_path: str | os.PathLike,
) -> str:
    """Populate the ingestor's store from a snapshot, or rebuild it from the repository.

    A missing or corrupt snapshot falls back to a full ingest, which is then
    persisted. If the repository is not checked out either, the store stays
    empty and retrieval returns its "no knowledge base" sentinel.

    Returns:
        str: "restored", "built" or "empty"
    """
    store = ingestor.store
    kb_path = Path(kb_path)
    repo_path = Path(repo_path)

    logger.info("🧠 Initializing knowledge base...")
    try:
        store.restore(kb_path)
        return "restored"
    except KnowledgeBaseNotFoundError:
        logger.info(f"No knowledge base snapshot at {kb_path}")
    except SnapshotCorruptError as e:
        logger.error(f"⚠️ Error loading knowledge base: {e}")
        logger.info("🔄 Will regenerate knowledge base...")

    if not repo_path.is_dir():
        logger.warning(f"⚠️ Repository path not found at {repo_path}")
        logger.warning("⚠️ Knowledge base will be empty until the repository is checked out")
        return "empty"

    logger.info(f"📂 Processing repository at {repo_path} to build knowledge base...")
    store.clear()
    stats = ingestor.ingest(repo_path)
    if store.persist(kb_path):
        logger.info(f"✅ Built and saved knowledge base ({stats.chunks} chunks)")
        return "built"
    return "empty"
