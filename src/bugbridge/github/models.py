"""Data models for the GitHub client."""

from dataclasses import dataclass


@dataclass
class IssueComment:
    """A comment posted on a GitHub issue."""

    id: int
    url: str
