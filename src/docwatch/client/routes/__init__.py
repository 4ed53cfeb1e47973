"""Flask route blueprints for the docwatch web application."""

from docwatch.client.routes.config import get_config, init_config
from docwatch.client.routes.context import context_bp
from docwatch.client.routes.health import health_bp
from docwatch.client.routes.webhook import webhook_bp

__all__ = [
    "context_bp",
    "health_bp",
    "webhook_bp",
    "init_config",
    "get_config",
]
