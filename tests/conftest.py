"""Pytest configuration and shared fixtures for the test suite."""

import zlib
from pathlib import Path
from typing import Callable

import pytest
import requests

from docwatch.knowledge import KnowledgeStore

EMBEDDING_DIMENSION = 16


# Service availability checks
def ollama_available() -> bool:
    """Check if Ollama server is running and accessible.

    Returns:
        True if Ollama is available, False otherwise
    """
    try:
        response = requests.get("http://localhost:11434/api/tags", timeout=2)
        return response.status_code == 200
    except requests.RequestException:
        return False


def fake_embed(text: str) -> list[float]:
    """Deterministic bag-of-words embedding.

    Each word is hashed into one of EMBEDDING_DIMENSION buckets, so texts
    sharing words are similar and identical texts have similarity 1.0.
    """
    vector = [0.0] * EMBEDDING_DIMENSION
    for word in text.split():
        vector[zlib.crc32(word.encode("utf-8")) % EMBEDDING_DIMENSION] += 1.0
    vector[0] += 0.01
    return vector


# Knowledge base fixtures
@pytest.fixture
def embed_fn() -> Callable[[str], list[float]]:
    """Provide the deterministic fake embedding function."""
    return fake_embed


@pytest.fixture
def store() -> KnowledgeStore:
    """Provide an empty store backed by the fake embedding function."""
    return KnowledgeStore(fake_embed)


@pytest.fixture
def make_repo(tmp_path) -> Callable[[dict[str, str]], Path]:
    """Factory writing a repository working tree from a {relative path: content} mapping.

    Returns:
        Callable returning the repository root
    """

    def _make_repo(files: dict[str, str]) -> Path:
        root = tmp_path / "repo"
        root.mkdir(exist_ok=True)
        for rel_path, content in files.items():
            path = root / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make_repo


# Service fixtures with skip markers
@pytest.fixture
def ollama_service():
    """Provide OllamaService instance, skip if Ollama not available.

    Raises:
        pytest.skip: If Ollama server is not running
    """
    if not ollama_available():
        pytest.skip("Ollama server not running on localhost:11434")

    from docwatch.llm import OllamaService

    return OllamaService(host="http://localhost:11434", model="llama3")


# Helper fixtures
@pytest.fixture
def mock_embedding():
    """Provide a simple mock embedding vector.

    Returns:
        List of floats representing an embedding vector
    """
    return [0.1, 0.2, 0.3, 0.15, -0.1, 0.05, 0.25, -0.05]
