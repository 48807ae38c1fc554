"""REST API - GitHub webhook receiver and run history."""

from bugbridge.api.app import create_app

__all__ = ["create_app"]
