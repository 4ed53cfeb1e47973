"""Helper functions for CLI commands."""

from pathlib import Path

import click

from docwatch.constants import CONTENT_PREVIEW_LENGTH
from docwatch.knowledge import (
    DocumentChunk,
    KnowledgeBaseNotFoundError,
    KnowledgeStore,
    SnapshotCorruptError,
)
from docwatch.llm import get_llm_service, make_embed_fn


def build_store(embedding_model: str | None = None) -> KnowledgeStore:
    """Create an empty store embedding through the configured LLM service."""
    return KnowledgeStore(make_embed_fn(get_llm_service(), embedding_model))


def load_store(kb_path: Path, embedding_model: str | None = None) -> KnowledgeStore:
    """Restore a store from ``kb_path``.

    Raises:
        click.Abort: If the snapshot is missing or unreadable
    """
    store = build_store(embedding_model)
    try:
        store.restore(kb_path)
    except KnowledgeBaseNotFoundError:
        click.echo(f"✗ Error: No knowledge base at {kb_path}", err=True)
        click.echo("\nPlease build it first using:", err=True)
        click.echo("  docwatch-ingest <repository>", err=True)
        raise click.Abort()
    except SnapshotCorruptError as e:
        click.echo(f"✗ Error: Knowledge base at {kb_path} is unreadable: {e}", err=True)
        click.echo("\nRebuild it with: docwatch-ingest <repository>", err=True)
        raise click.Abort()
    return store


def format_search_result(
    index: int, chunk: DocumentChunk, score: float, max_length: int = CONTENT_PREVIEW_LENGTH
) -> str:
    """Format a search result for display.

    Args:
        index: Result number (1-based)
        chunk: The matching chunk
        score: Cosine similarity to the query
        max_length: Maximum content length before truncation

    Returns:
        Formatted string for display
    """
    content = chunk.content
    display_content = content[:max_length] + "..." if len(content) > max_length else content

    lines = [
        f"{index}. [{chunk.source} - {chunk.metadata.type.value}] (score: {score:.4f})",
        f"   {display_content}",
        "",
    ]
    return "\n".join(lines)


def format_stats(stats: dict) -> str:
    """Render store statistics as one line per content type."""
    lines = [f"📊 Knowledge base contains {stats['chunks']} chunk(s)"]
    if stats.get("dimension"):
        lines.append(f"   Embedding dimension: {stats['dimension']}")
    for type_name, count in sorted(stats.get("by_type", {}).items()):
        lines.append(f"   {type_name}: {count}")
    return "\n".join(lines)
