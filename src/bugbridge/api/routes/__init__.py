"""API route modules."""

from bugbridge.api.routes import health, runs, webhooks

__all__ = ["health", "runs", "webhooks"]
