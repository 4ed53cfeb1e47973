"""Application-wide constants and defaults for DocWatch.

This module provides a single source of truth for configuration defaults,
magic numbers, and other constants used throughout the application.
"""

import os

# =============================================================================
# Knowledge Base Settings
# =============================================================================
DEFAULT_MAX_CHUNK_SIZE = 8000  # Characters, not tokens
DEFAULT_TOP_K = 5  # Default number of results for context retrieval
DEFAULT_INGEST_WORKERS = 1  # Sequential ingestion unless configured otherwise
SNAPSHOT_FORMAT_VERSION = 1

NO_KNOWLEDGE_BASE_MESSAGE = "No knowledge base available"
NO_RELEVANT_CONTEXT_MESSAGE = "No relevant context found"

# Directory names that are never walked (exact, case-sensitive match)
EXCLUDED_DIRECTORIES = frozenset(
    {
        ".git",
        "node_modules",
        "dist",
        "build",
        "out",
        ".next",
        "coverage",
        "__pycache__",
        ".venv",
    }
)

# =============================================================================
# File Classification
# =============================================================================
CODE_EXTENSIONS = frozenset({".ts", ".tsx", ".js", ".jsx", ".py"})
DOCUMENTATION_EXTENSIONS = frozenset({".md", ".mdx"})
CONFIGURATION_EXTENSIONS = frozenset({".json", ".yaml", ".yml", ".toml"})

RECOGNIZED_EXTENSIONS = CODE_EXTENSIONS | DOCUMENTATION_EXTENSIONS | CONFIGURATION_EXTENSIONS

# =============================================================================
# Display Settings
# =============================================================================
CONTENT_PREVIEW_LENGTH = 200  # Characters to show in content previews

# =============================================================================
# Default URLs and Hosts
# =============================================================================
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_MCP_HOST = "0.0.0.0"
DEFAULT_MCP_PORT = 8001
DEFAULT_POLL_INTERVAL_SECONDS = 300
GITHUB_REQUEST_TIMEOUT = 30  # Seconds

PULL_REQUEST_TITLE_PREFIX = "[TRIGGERED BY BOT] - "

# =============================================================================
# Embedding Model Defaults
# =============================================================================
EMBEDDING_DEFAULTS = {
    "ollama": "nomic-embed-text",
    "gemini": "text-embedding-004",
}


def get_embedding_model(service: str | None = None) -> str:
    """Get the default embedding model for a given LLM service.

    Checks the EMBEDDING_MODEL environment variable first, then falls back
    to service-specific defaults.

    Args:
        service: The LLM service name ("ollama" or "gemini").
                If None, uses LLM_SERVICE env var or defaults to "ollama".

    Returns:
        str: The embedding model name to use.
    """
    env_model = os.getenv("EMBEDDING_MODEL")
    if env_model:
        return env_model

    if service is None:
        service = os.getenv("LLM_SERVICE", "ollama")

    return EMBEDDING_DEFAULTS.get(service, EMBEDDING_DEFAULTS["ollama"])
