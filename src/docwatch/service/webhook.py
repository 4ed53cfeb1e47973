"""GitHub webhook verification and payload helpers."""

import hashlib
import hmac
import json
from typing import Any
from urllib.parse import parse_qs


class WebhookSignatureError(Exception):
    """The X-Hub-Signature-256 header is missing or does not match the body."""


def compute_signature(secret: str, body: bytes) -> str:
    """HMAC-SHA256 signature of ``body`` in GitHub's "sha256=<hex>" form."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


def verify_signature(secret: str, body: bytes, signature_header: str | None) -> None:
    """Check a delivery's signature against the shared secret.

    Raises:
        WebhookSignatureError: If the secret or header is missing or the digest differs
    """
    if not secret:
        raise WebhookSignatureError("Webhook secret is not configured")
    if not signature_header or not signature_header.startswith("sha256="):
        raise WebhookSignatureError("Missing or malformed signature header")
    expected = compute_signature(secret, body)
    if not hmac.compare_digest(expected, signature_header):
        raise WebhookSignatureError("Invalid webhook signature")


def parse_payload(body: bytes, content_type: str | None = None) -> dict[str, Any]:
    """Decode a delivery body sent either as JSON or as form-encoded ``payload=...``.

    Raises:
        ValueError: If the body is not a JSON object in either encoding
    """
    text = body.decode("utf-8")
    is_form = (content_type or "").startswith("application/x-www-form-urlencoded") or text.startswith(
        "payload="
    )
    if is_form:
        values = parse_qs(text).get("payload")
        if not values:
            raise ValueError("Form-encoded delivery has no payload field")
        text = values[0]

    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError("Webhook payload must be a JSON object")
    return payload


def extract_push_changed_files(payload: dict[str, Any]) -> list[str]:
    """Collect added, modified and removed paths across all commits of a push.

    Order of first appearance is kept; duplicates are dropped.
    """
    paths: list[str] = []
    for commit in payload.get("commits") or []:
        for key in ("added", "modified", "removed"):
            paths.extend(commit.get(key) or [])
    return list(dict.fromkeys(paths))


def is_monitored_repository(payload: dict[str, Any], owner: str, name: str | None = None) -> bool:
    """True if the event's repository belongs to ``owner`` (and is ``name`` when given).

    Push payloads carry the owner as ``name``; other events use ``login``.
    """
    repository = payload.get("repository") or {}
    repo_owner = repository.get("owner") or {}
    owner_matches = owner in (repo_owner.get("login"), repo_owner.get("name"))
    if name is None:
        return owner_matches
    return owner_matches and repository.get("name") == name
