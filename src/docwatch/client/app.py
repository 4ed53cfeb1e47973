"""Flask web application receiving GitHub webhooks.

This module wires the knowledge base, the GitHub client and the
documentation writer into a DocUpdateAgent, and exposes it through a
webhook endpoint alongside health and context routes.
"""

import logging
import os

from dotenv import load_dotenv
from flask import Flask

from docwatch.client.routes import context_bp, health_bp, init_config, webhook_bp
from docwatch.constants import DEFAULT_OLLAMA_HOST
from docwatch.knowledge import (
    IngestOptions,
    KnowledgeBaseConfig,
    KnowledgeStore,
    RepositoryIngestor,
    initialize_knowledge_base,
)
from docwatch.llm import get_llm_service, make_embed_fn
from docwatch.service.agent import DocUpdateAgent
from docwatch.service.config import GitHubConfig

# Configure logging
log_level = os.getenv("LOG_LEVEL", "DEBUG")
logging.basicConfig(
    level=getattr(logging, log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()
logger.debug("Environment variables loaded")

# Create Flask app
app = Flask(__name__)
logger.debug("Flask app created")

# Register blueprints
app.register_blueprint(webhook_bp)
app.register_blueprint(context_bp)
app.register_blueprint(health_bp)


def initialize_services():
    """Initialize the knowledge base, GitHub client and agent on startup."""
    logger.info("🔧 Initializing services...")

    llm_config = {
        "service": os.getenv("LLM_SERVICE", "ollama"),
        "host": os.getenv("OLLAMA_HOST", DEFAULT_OLLAMA_HOST),
        "model": os.getenv("LLM_MODEL", "llama3"),
    }
    logger.debug(f"LLM config: {llm_config}")
    llm_service = get_llm_service(llm_config)
    logger.info("✅ LLM service initialized successfully")

    options = IngestOptions.from_env()
    repo_path = KnowledgeBaseConfig.get_repo_path()
    kb_path = KnowledgeBaseConfig.get_knowledge_base_path()

    store = KnowledgeStore(make_embed_fn(llm_service))
    ingestor = RepositoryIngestor(store, options)
    outcome = initialize_knowledge_base(ingestor, repo_path, kb_path)
    logger.info(f"✅ Knowledge base {outcome} ({len(store)} chunks)")

    agent = DocUpdateAgent.from_env(store, llm_service, options)
    settings = agent.settings
    logger.info(
        f"✅ Monitoring {settings.monitor_owner}/{settings.monitor_repo}, "
        f"documenting into {settings.docs_owner}/{settings.docs_repo}"
    )

    webhook_secret = GitHubConfig.get_webhook_secret()
    if not webhook_secret:
        logger.warning("⚠️ GITHUB_WEBHOOK_SECRET is not set, all webhook deliveries will be rejected")

    init_config(agent=agent, store=store, retriever=agent.retriever, webhook_secret=webhook_secret)


def create_app():
    """Factory function for creating the Flask application.

    This function is used by WSGI servers like gunicorn to create the app.
    It initializes services before returning the app instance.

    Returns:
        Flask: The configured Flask application instance
    """
    initialize_services()
    return app


def main() -> None:
    """Entry point for the webhook server command-line interface."""
    print("🚀 Starting DocWatch webhook server...")

    print("📦 Initializing services...")
    initialize_services()
    print("✅ Services initialized successfully")

    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", "5000"))
    debug = os.getenv("FLASK_ENV", "development") == "development"

    print(f"🌐 Starting Flask server on http://{host}:{port}")
    print(f"🔧 Debug mode: {debug}")
    print("📝 Press CTRL+C to quit")

    app.run(host=host, port=port, debug=debug, use_reloader=False)


if __name__ == "__main__":
    main()
