"""GitHub webhook receiver."""

import logging

from flask import Blueprint, jsonify, request

from docwatch.client.routes.config import get_config
from docwatch.service.webhook import WebhookSignatureError, parse_payload, verify_signature

logger = logging.getLogger(__name__)

webhook_bp = Blueprint("webhook", __name__)

EVENT_HEADER = "X-GitHub-Event"
SIGNATURE_HEADER = "X-Hub-Signature-256"


@webhook_bp.route("/webhook", methods=["POST"])
def webhook():
    """Handle push and pull_request deliveries from GitHub.

    The body must carry a valid X-Hub-Signature-256 for the configured
    secret. Deliveries are processed one at a time by the agent.

    Response:
        {"status": "processed" | "ignored" | "pong"}

    Returns:
        200 on success, 400 for malformed deliveries, 401 for a bad
        signature and 500 if processing fails
    """
    config = get_config()
    event = request.headers.get(EVENT_HEADER)
    signature = request.headers.get(SIGNATURE_HEADER)

    if not event or not signature:
        logger.warning("❌ Webhook delivery missing event or signature header")
        return jsonify({"error": "Missing required headers"}), 400

    body = request.get_data()
    try:
        verify_signature(config.webhook_secret or "", body, signature)
    except WebhookSignatureError as e:
        logger.warning(f"❌ Rejected webhook delivery: {e}")
        return jsonify({"error": "Invalid signature"}), 401

    try:
        payload = parse_payload(body, request.content_type)
    except ValueError as e:
        logger.warning(f"❌ Could not parse webhook payload: {e}")
        return jsonify({"error": "Invalid payload"}), 400

    if event == "ping":
        return jsonify({"status": "pong"})

    if config.agent is None:
        logger.error("❌ Webhook received before the agent was initialized")
        return jsonify({"error": "Agent is not initialized"}), 503

    logger.info(f"📨 Received '{event}' webhook")
    try:
        status = config.agent.dispatch(event, payload)
    except Exception as e:
        logger.error(f"❌ Error processing webhook: {e}", exc_info=True)
        return jsonify({"error": "Error processing webhook"}), 500

    return jsonify({"status": status})
