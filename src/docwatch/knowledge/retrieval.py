"""Context retrieval over the knowledge base."""

import logging

from docwatch.constants import (
    DEFAULT_TOP_K,
    NO_KNOWLEDGE_BASE_MESSAGE,
    NO_RELEVANT_CONTEXT_MESSAGE,
)
from docwatch.knowledge.models import ContentType, DocumentChunk
from docwatch.knowledge.store import KnowledgeStore

logger = logging.getLogger(__name__)


def format_context(chunks: list[DocumentChunk]) -> str:
    """Render retrieved chunks as "[source] content" blocks.

    Args:
        chunks: Chunks in ranking order

    Returns:
        Formatted context string, or the no-context message for an empty list
    """
    if not chunks:
        return NO_RELEVANT_CONTEXT_MESSAGE
    return "\n\n".join(f"[{chunk.source}] {chunk.content}" for chunk in chunks)


def is_empty_context(context: str) -> bool:
    """True if ``context`` is one of the "nothing found" sentinels rather than real context."""
    return context in (NO_KNOWLEDGE_BASE_MESSAGE, NO_RELEVANT_CONTEXT_MESSAGE)


class ContextRetriever:
    """Answers free-text queries with the most similar stored chunks."""

    def __init__(self, store: KnowledgeStore) -> None:
        self.store = store

    def search(
        self,
        query: str,
        top_k: int = DEFAULT_TOP_K,
        type_filter: ContentType | str | None = ContentType.CODE,
    ) -> list[tuple[DocumentChunk, float]]:
        """Embed ``query`` and return scored matches.

        The type filter is applied to each chunk's source extension rather
        than its stored metadata, so stale metadata cannot hide a chunk.
        """
        if self.store.is_empty():
            return []
        query_embedding = self.store.embed(query)
        return self.store.search_with_scores(
            query_embedding, top_k, type_filter=type_filter, trust_metadata=False
        )

    def retrieve(
        self,
        query: str,
        top_k: int = DEFAULT_TOP_K,
        type_filter: ContentType | str | None = ContentType.CODE,
    ) -> str:
        """Return formatted context for ``query``.

        Returns:
            str: "[source] content" blocks, or a sentinel when the store is
            empty or nothing matches the filter. Sentinels are not errors.
        """
        if self.store.is_empty():
            logger.warning("⚠️ Knowledge base is empty, no context available")
            return NO_KNOWLEDGE_BASE_MESSAGE

        results = self.search(query, top_k=top_k, type_filter=type_filter)
        logger.info(f"📚 Retrieved {len(results)} chunks for query '{query[:80]}'")
        return format_context([chunk for chunk, _ in results])
