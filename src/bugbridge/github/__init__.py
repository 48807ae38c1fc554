"""Back-reference Notifier - Links GitHub issues to their Jira tickets."""

from bugbridge.github.client import GitHubClient, format_backlink
from bugbridge.github.exceptions import CommentError, GitHubError
from bugbridge.github.models import IssueComment

__all__ = [
    "CommentError",
    "GitHubClient",
    "GitHubError",
    "IssueComment",
    "format_backlink",
]
