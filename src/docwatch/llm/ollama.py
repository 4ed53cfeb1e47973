"""Ollama LLM service implementation."""

import asyncio
import logging

import ollama

from docwatch.constants import get_embedding_model

logger = logging.getLogger(__name__)


class OllamaService:
    """Ollama LLM service implementation.

    Uses a local Ollama server for both documentation drafting and
    knowledge base embeddings.
    """

    def __init__(self, host: str, model: str) -> None:
        """Initialize the Ollama service.

        Args:
            host: The Ollama server host URL (e.g., "http://localhost:11434")
            model: The model name to use (e.g., "llama3")
        """
        self.host = host
        self.model = model
        logger.info(f"🤖 Initializing OllamaService: host={host}, model={model}")
        self.client = ollama.Client(host=host)

    async def generate_response(self, messages: list[dict]) -> str:
        """Generate a response using Ollama.

        The client is synchronous, so the call runs in a worker thread to keep
        the event loop free for other deliveries.

        Args:
            messages: List of message dictionaries with 'role' and 'content' keys.

        Returns:
            str: The generated response content from the model.
        """
        logger.info(f"🗣️  Generating response with {self.model}")
        logger.debug(f"Messages: {len(messages)} messages")

        try:
            response = await asyncio.to_thread(
                self.client.chat, model=self.model, messages=messages
            )
            content = response.message.content or ""
            logger.info(f"✅ Response generated: {len(content)} characters")
            return content
        except Exception as e:
            logger.error(f"❌ Ollama API error: {e}", exc_info=True)
            raise

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Generate embeddings for a list of texts using Ollama.

        Args:
            texts: List of text strings to embed
            model: Optional embedding model name. If None, uses EMBEDDING_MODEL env var
                   or service-specific default.

        Returns:
            list[list[float]]: List of embedding vectors
        """
        embedding_model = model or get_embedding_model("ollama")
        embeddings = []

        for text in texts:
            response = self.client.embed(model=embedding_model, input=text)
            embeddings.append(list(response["embeddings"][0]))

        logger.debug(f"Generated {len(embeddings)} embeddings with {embedding_model}")
        return embeddings
