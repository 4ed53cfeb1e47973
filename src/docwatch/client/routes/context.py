"""Code context API route."""

import logging

from flask import Blueprint, jsonify, request

from docwatch.client.routes.config import get_config
from docwatch.constants import DEFAULT_TOP_K, NO_KNOWLEDGE_BASE_MESSAGE
from docwatch.knowledge import ContentType, format_context

logger = logging.getLogger(__name__)

context_bp = Blueprint("context", __name__)


@context_bp.route("/api/context", methods=["POST"])
def context():
    """Return formatted knowledge base context for a query.

    Request:
        {
            "query": "How are webhooks verified?",
            "top_k": 5,  # Optional, default 5
            "type": "code"  # Optional: code, documentation, configuration, other or "all"
        }

    Response:
        {
            "context": "[src/webhook.ts] ...",
            "results": [{"source": "src/webhook.ts", "type": "code", "score": 0.83}]
        }
    """
    config = get_config()
    if config.retriever is None:
        return jsonify({"error": "Knowledge base is not initialized"}), 503

    data = request.get_json(silent=True)
    if not data or not data.get("query"):
        logger.warning("❌ Missing 'query' field in request")
        return jsonify({"error": "Missing 'query' field in request"}), 400

    query = data["query"]
    top_k = data.get("top_k", DEFAULT_TOP_K)
    type_name = data.get("type", ContentType.CODE.value)

    if not isinstance(top_k, int) or top_k < 0:
        return jsonify({"error": "'top_k' must be a non-negative integer"}), 400
    try:
        type_filter = None if type_name in (None, "all") else ContentType(type_name)
    except ValueError:
        return jsonify({"error": f"Unknown content type '{type_name}'"}), 400

    logger.info(f"🔍 Context query: '{query[:100]}' (top_k={top_k}, type={type_name})")
    try:
        results = config.retriever.search(query, top_k=top_k, type_filter=type_filter)
    except Exception as e:
        logger.error(f"❌ Error retrieving context: {e}", exc_info=True)
        return jsonify({"error": str(e)}), 500

    if config.retriever.store.is_empty():
        text = NO_KNOWLEDGE_BASE_MESSAGE
    else:
        text = format_context([chunk for chunk, _ in results])

    return jsonify(
        {
            "context": text,
            "results": [
                {"source": chunk.source, "type": chunk.metadata.type.value, "score": score}
                for chunk, score in results
            ],
        }
    )
