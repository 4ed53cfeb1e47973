"""FastMCP server exposing code context from the knowledge base."""

import logging
import os
from dataclasses import dataclass
from typing import Any

from dotenv import load_dotenv
from fastmcp import FastMCP

from docwatch.constants import DEFAULT_MCP_HOST, DEFAULT_MCP_PORT, DEFAULT_TOP_K
from docwatch.knowledge import (
    ContentType,
    ContextRetriever,
    IngestOptions,
    KnowledgeBaseConfig,
    KnowledgeStore,
    RepositoryIngestor,
    initialize_knowledge_base,
)
from docwatch.llm import get_llm_service, make_embed_fn

# Configure logging
log_level = os.getenv("LOG_LEVEL", "DEBUG")
logging.basicConfig(
    level=getattr(logging, log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()
logger.debug("Environment variables loaded for MCP server")

# Create FastMCP instance
mcp = FastMCP("DocWatch Code Context")

MAX_LISTED_SOURCES = 50


@dataclass
class ServerState:
    """Knowledge base objects shared by the MCP tools."""

    store: KnowledgeStore | None = None
    retriever: ContextRetriever | None = None


_state = ServerState()


def init_server(store: KnowledgeStore, retriever: ContextRetriever | None = None) -> None:
    """Attach a knowledge store (and optionally a retriever) to the MCP tools."""
    _state.store = store
    _state.retriever = retriever or ContextRetriever(store)


def _parse_content_type(content_type: str | None) -> ContentType | None:
    if content_type is None or content_type.lower() in ("", "all", "any"):
        return None
    try:
        return ContentType(content_type.lower())
    except ValueError as e:
        allowed = ", ".join(t.value for t in ContentType)
        raise ValueError(f"Unknown content type '{content_type}' (expected one of: {allowed}, all)") from e


async def retrieve_code_context_impl(
    query: str, top_k: int = DEFAULT_TOP_K, content_type: str | None = "code"
) -> list[dict[str, Any]]:
    """Search the knowledge base and return scored chunks as plain dicts."""
    logger.debug(f"MCP Tool: query='{query[:100]}', top_k={top_k}, content_type={content_type}")
    if _state.retriever is None:
        raise ValueError("Knowledge base is not initialized")

    type_filter = _parse_content_type(content_type)
    results = _state.retriever.search(query, top_k=top_k, type_filter=type_filter)
    logger.info(f"✅ MCP Tool: Returning {len(results)} chunks to MCP client")
    return [
        {
            "source": chunk.source,
            "type": chunk.metadata.type.value,
            "score": score,
            "content": chunk.content,
        }
        for chunk, score in results
    ]


async def knowledge_base_stats_impl() -> dict[str, Any]:
    """Summarize the knowledge base: chunk counts by type and a few sample sources."""
    if _state.store is None:
        return {"chunks": 0, "dimension": None, "by_type": {}, "sources": []}

    stats = _state.store.stats()
    sources = list(dict.fromkeys(chunk.source_path for chunk in _state.store.chunks))
    stats["sources"] = sources[:MAX_LISTED_SOURCES]
    return stats


@mcp.tool()
async def retrieve_code_context(
    query: str, top_k: int = DEFAULT_TOP_K, content_type: str | None = "code"
) -> list[dict[str, Any]]:
    """
    Searches the repository knowledge base for chunks that are semantically
    similar to the query. Use this tool to find the code a documentation
    change should describe.

    Args:
        query: The search query text
        top_k: Number of top results to return (default: 5)
        content_type: "code", "documentation", "configuration", "other" or "all"
    """
    try:
        return await retrieve_code_context_impl(query, top_k=top_k, content_type=content_type)
    except ValueError:
        raise
    except Exception as e:
        error_msg = f"Unexpected error: {type(e).__name__}: {e}"
        logger.error(f"❌ MCP Tool: {error_msg}", exc_info=True)
        raise ValueError(error_msg) from e


@mcp.tool()
async def knowledge_base_stats() -> dict[str, Any]:
    """
    Reports how many chunks the knowledge base holds, broken down by content
    type, with the embedding dimension and the indexed source paths.
    """
    return await knowledge_base_stats_impl()


def main() -> None:
    """Entry point for the MCP server command-line interface."""
    logger.info("🚀 Starting DocWatch MCP Server...")

    store = KnowledgeStore(make_embed_fn(get_llm_service()))
    ingestor = RepositoryIngestor(store, IngestOptions.from_env())
    initialize_knowledge_base(
        ingestor,
        KnowledgeBaseConfig.get_repo_path(),
        KnowledgeBaseConfig.get_knowledge_base_path(),
    )
    init_server(store)

    host = os.getenv("MCP_HOST", DEFAULT_MCP_HOST)
    port = int(os.getenv("MCP_PORT", str(DEFAULT_MCP_PORT)))
    mcp.run(transport="sse", host=host, port=port)


if __name__ == "__main__":
    main()
