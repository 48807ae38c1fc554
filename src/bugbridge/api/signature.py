"""GitHub webhook signature verification."""

from __future__ import annotations

import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


class WebhookSignatureError(Exception):
    """Webhook signature is missing or does not match the payload."""


def compute_signature(secret: str, payload: bytes) -> str:
    """Compute the ``X-Hub-Signature-256`` header value for a payload."""
    digest = hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(secret: str, payload: bytes, signature: str | None) -> None:
    """Check a delivery's signature against the shared secret.

    Raises:
        WebhookSignatureError: If the signature is missing or wrong.
    """
    if not signature:
        raise WebhookSignatureError("Missing X-Hub-Signature-256 header")
    if not hmac.compare_digest(compute_signature(secret, payload), signature):
        raise WebhookSignatureError("Webhook signature does not match payload")
