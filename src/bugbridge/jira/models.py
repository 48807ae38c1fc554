"""Data models for the Jira client."""

from dataclasses import dataclass


@dataclass
class CreatedTicket:
    """A ticket created in Jira."""

    key: str  # e.g. "BUG-123"
    id: str
    browse_url: str
