"""Custom exceptions for the Jira client."""


class JiraError(Exception):
    """Base exception for Jira errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class JiraAuthError(JiraError):
    """Credentials were rejected (expired or misconfigured API token)."""


class JiraRequestError(JiraError):
    """Jira rejected the ticket fields (unknown project key, bad field values)."""
