"""GitHubClient - Posts back-reference comments on GitHub issues."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

import httpx

from bugbridge.github.exceptions import CommentError
from bugbridge.github.models import IssueComment
from bugbridge.logging import truncate_output

if TYPE_CHECKING:
    from bugbridge.jira import CreatedTicket

logger = logging.getLogger("bugbridge.github")


def format_backlink(ticket: CreatedTicket) -> str:
    """Build the markdown comment linking an issue to its Jira ticket."""
    return f"Jira ticket created: [{ticket.key}]({ticket.browse_url})"


class GitHubClient:
    """Minimal GitHub REST client for issue comments."""

    def __init__(self, token: str, base_url: str = "https://api.github.com") -> None:
        """Initialize GitHub Client.

        Args:
            token: GitHub token with issues write permission
            base_url: GitHub API base URL (for testing/enterprise)
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for GitHub API."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = httpx.Client(
                        base_url=self.base_url,
                        headers={
                            "Authorization": f"Bearer {self.token}",
                            "Accept": "application/vnd.github+json",
                            "X-GitHub-Api-Version": "2022-11-28",
                        },
                        timeout=30.0,
                    )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def post_comment(self, repo: str, issue_number: int, body: str) -> IssueComment:
        """Post a comment on an issue.

        Args:
            repo: GitHub repo in "owner/repo" format
            issue_number: The issue number
            body: Comment markdown

        Returns:
            The created comment

        Raises:
            CommentError: If the comment could not be posted
        """
        logger.info("Commenting on %s#%d", repo, issue_number)
        try:
            response = self.client.post(
                f"/repos/{repo}/issues/{issue_number}/comments",
                json={"body": body},
            )
        except httpx.HTTPError as e:
            logger.error("GitHub unreachable: %s", e)
            raise CommentError(f"GitHub unreachable: {e}") from e

        if response.status_code != 201:
            logger.error("Failed to comment on %s#%d: %s", repo, issue_number, response.text)
            raise CommentError(
                f"Failed to comment on issue #{issue_number}: "
                f"{response.status_code} - {response.text}"
            )

        try:
            data = response.json()
            comment = IssueComment(id=data["id"], url=data.get("html_url") or "")
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error("Unreadable GitHub reply: %s", truncate_output(response.text, 500))
            raise CommentError(
                f"Unexpected GitHub response: {truncate_output(response.text, 500)}"
            ) from e
        logger.info("Posted comment %s", comment.url)
        return comment

    def notify(self, repo: str, issue_number: int, ticket: CreatedTicket) -> IssueComment:
        """Comment on an issue with a link to its ticket."""
        return self.post_comment(repo, issue_number, format_backlink(ticket))
