"""LLM service abstraction layer for docwatch.

This package provides a unified interface for multiple LLM providers:
- OllamaService: Local LLM via Ollama
- GeminiService: Google Gemini API

Usage:
    from docwatch.llm import get_llm_service, make_embed_fn

    service = get_llm_service()
    embed = make_embed_fn(service)
"""

from docwatch.llm.base import EmbedFn, LLMService, make_embed_fn
from docwatch.llm.factory import get_llm_service
from docwatch.llm.gemini import GeminiService
from docwatch.llm.ollama import OllamaService

__all__ = [
    "EmbedFn",
    "LLMService",
    "OllamaService",
    "GeminiService",
    "get_llm_service",
    "make_embed_fn",
]
