"""Base protocol for LLM services and the embedding adapter used by the knowledge base."""

import logging
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)

EmbedFn = Callable[[str], list[float]]


class LLMService(Protocol):
    """Protocol defining the interface for LLM services.

    Text generation drives documentation drafting; embeddings drive the
    knowledge base. Providers only need to implement these two calls.
    """

    async def generate_response(self, messages: list[dict]) -> str:
        """Generate a response from the LLM based on the provided messages.

        Args:
            messages: List of message dictionaries with 'role' and 'content' keys.
                     Example: [{"role": "system", "content": "..."},
                               {"role": "user", "content": "Hello"}]

        Returns:
            str: The generated response content from the LLM.
        """
        ...

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Generate embeddings for a list of texts.

        Args:
            texts: List of text strings to embed
            model: Optional embedding model name. If None, uses a default for the service.

        Returns:
            list[list[float]]: List of embedding vectors
        """
        ...


def make_embed_fn(service: LLMService, model: str | None = None) -> EmbedFn:
    """Adapt an LLM service into the single-text embedding function the store expects.

    Args:
        service: Any LLMService implementation
        model: Optional embedding model override

    Returns:
        Callable mapping one text to one embedding vector
    """

    def embed(text: str) -> list[float]:
        embeddings = service.generate_embeddings([text], model)
        if not embeddings:
            raise ValueError("Embedding service returned no vectors")
        return [float(value) for value in embeddings[0]]

    return embed
