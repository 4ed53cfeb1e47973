"""Shared configuration for route modules."""

from dataclasses import dataclass
from typing import Any


@dataclass
class RouteConfig:
    """Configuration container for Flask route dependencies.

    Routes read the agent and knowledge base objects from here instead of
    module globals, so tests can swap in mocks.
    """

    agent: Any = None
    store: Any = None
    retriever: Any = None
    webhook_secret: str | None = None


# Single shared config instance
_config = RouteConfig()


def get_config() -> RouteConfig:
    """Get the shared route configuration.

    Returns:
        RouteConfig instance with current settings
    """
    return _config


def init_config(
    agent: Any = None,
    store: Any = None,
    retriever: Any = None,
    webhook_secret: str | None = None,
) -> None:
    """Initialize the shared route configuration.

    Args:
        agent: DocUpdateAgent handling webhook events
        store: KnowledgeStore backing retrieval
        retriever: ContextRetriever over the store
        webhook_secret: Shared secret for X-Hub-Signature-256 verification
    """
    if agent is not None:
        _config.agent = agent
    if store is not None:
        _config.store = store
    if retriever is not None:
        _config.retriever = retriever
    if webhook_secret is not None:
        _config.webhook_secret = webhook_secret
