"""Incremental semantic knowledge base over a source repository.

This package provides:
- Chunking of oversized files along declaration boundaries
- An in-memory store with cosine-similarity search and JSON snapshots
- Full-repository ingestion and per-event incremental updates
- Context retrieval for documentation drafting

Usage:
    from docwatch.knowledge import (
        ContextRetriever,
        IngestOptions,
        KnowledgeStore,
        RepositoryIngestor,
    )
"""

from docwatch.knowledge.chunking import chunk_text
from docwatch.knowledge.config import IngestOptions, KnowledgeBaseConfig
from docwatch.knowledge.errors import (
    DocumentIngestError,
    EmbeddingDimensionError,
    KnowledgeBaseError,
    KnowledgeBaseNotFoundError,
    SnapshotCorruptError,
)
from docwatch.knowledge.ingest import RepositoryIngestor, add_document
from docwatch.knowledge.lifecycle import initialize_knowledge_base
from docwatch.knowledge.models import ChunkMetadata, ContentType, DocumentChunk, IngestStats
from docwatch.knowledge.retrieval import ContextRetriever, format_context, is_empty_context
from docwatch.knowledge.store import KnowledgeStore
from docwatch.knowledge.updater import IncrementalUpdater
from docwatch.knowledge.utils import classify_content_type, cosine_similarity

__all__ = [
    # Config
    "IngestOptions",
    "KnowledgeBaseConfig",
    # Models
    "ChunkMetadata",
    "ContentType",
    "DocumentChunk",
    "IngestStats",
    # Errors
    "DocumentIngestError",
    "EmbeddingDimensionError",
    "KnowledgeBaseError",
    "KnowledgeBaseNotFoundError",
    "SnapshotCorruptError",
    # Components
    "KnowledgeStore",
    "RepositoryIngestor",
    "IncrementalUpdater",
    "ContextRetriever",
    "initialize_knowledge_base",
    # Helpers
    "add_document",
    "chunk_text",
    "classify_content_type",
    "cosine_similarity",
    "format_context",
    "is_empty_context",
]
