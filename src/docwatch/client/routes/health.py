"""Health check API route."""

import logging

from flask import Blueprint, jsonify

from docwatch.client.routes.config import get_config

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint.

    Returns:
        JSON with service status and knowledge base size
    """
    config = get_config()
    store = config.store
    return jsonify(
        {
            "status": "healthy",
            "agent": "initialized" if config.agent else "not initialized",
            "knowledge_base": store.stats() if store is not None else None,
        }
    )
