"""Custom exceptions for the GitHub client."""


class GitHubError(Exception):
    """Base exception for GitHub client errors."""


class CommentError(GitHubError):
    """Error posting a comment on an issue."""
