"""Google Gemini LLM service implementation."""

import asyncio
import logging

from google import genai

from docwatch.constants import get_embedding_model

logger = logging.getLogger(__name__)


class GeminiService:
    """Google Gemini LLM service implementation.

    The API key is automatically retrieved from the GEMINI_API_KEY environment variable.
    """

    def __init__(self, model: str) -> None:
        """Initialize the Gemini service.

        Args:
            model: The model name to use (e.g., "gemini-2.5-flash")
        """
        self.model = model
        logger.info(f"🤖 Initializing GeminiService: model={model}")
        self.client = genai.Client()

    @staticmethod
    def _split_messages(messages: list[dict]) -> tuple[str | None, str]:
        """Separate system instructions from the conversational content.

        Gemini takes the system prompt as configuration rather than as a
        message, so system messages are joined into one instruction and the
        remaining messages are concatenated into the prompt.
        """
        system_parts = [m.get("content", "") for m in messages if m.get("role") == "system"]
        other_parts = [m.get("content", "") for m in messages if m.get("role") != "system"]
        system_instruction = "\n".join(system_parts) if system_parts else None
        return system_instruction, "\n".join(other_parts)

    async def generate_response(self, messages: list[dict]) -> str:
        """Generate a response using Gemini.

        Args:
            messages: List of message dictionaries with 'role' and 'content' keys.

        Returns:
            str: The generated response content from the model.
        """
        logger.info(f"🗣️  Generating response with {self.model}")
        logger.debug(f"Messages: {len(messages)} messages")

        system_instruction, contents = self._split_messages(messages)
        generate_kwargs = {"model": self.model, "contents": contents}
        if system_instruction:
            generate_kwargs["config"] = genai.types.GenerateContentConfig(
                system_instruction=system_instruction,
            )

        try:
            response = await asyncio.to_thread(
                self.client.models.generate_content, **generate_kwargs
            )
            content = response.text or ""
            logger.info(f"✅ Response generated: {len(content)} characters")
            return content
        except Exception as e:
            logger.error(f"❌ Gemini API error: {e}", exc_info=True)
            raise

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Generate embeddings for a list of texts using Gemini.

        Args:
            texts: List of text strings to embed
            model: Optional embedding model name. If None, uses EMBEDDING_MODEL env var
                   or service-specific default.

        Returns:
            list[list[float]]: List of embedding vectors
        """
        embedding_model = model or get_embedding_model("gemini")
        embeddings = []

        for text in texts:
            try:
                response = self.client.models.embed_content(model=embedding_model, contents=[text])
                embeddings.append(list(response.embeddings[0].values))
            except Exception as e:
                logger.error(f"❌ Gemini embedding error: {e}", exc_info=True)
                raise

        logger.debug(f"Generated {len(embeddings)} embeddings with {embedding_model}")
        return embeddings
