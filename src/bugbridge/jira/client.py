"""JiraClient - Creates bug tickets through the Jira REST API."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

import httpx

from bugbridge.jira.exceptions import JiraAuthError, JiraError, JiraRequestError
from bugbridge.jira.formatter import build_description
from bugbridge.jira.models import CreatedTicket
from bugbridge.logging import truncate_output

if TYPE_CHECKING:
    from bugbridge.events import IssueEvent
    from bugbridge.extraction import ExtractionRecord

logger = logging.getLogger("bugbridge.jira")


class JiraClient:
    """Client for Jira Cloud issue creation.

    Uses REST API v2 so descriptions can be sent as wiki markup.
    """

    def __init__(
        self,
        base_url: str,
        email: str,
        api_token: str,
        project_key: str,
        issue_type: str = "Bug",
    ) -> None:
        """Initialize Jira Client.

        Args:
            base_url: Jira site URL (e.g. "https://example.atlassian.net")
            email: Account email used for basic auth
            api_token: Atlassian API token
            project_key: Key of the project tickets are created in
            issue_type: Issue type name for created tickets
        """
        self.base_url = base_url.rstrip("/")
        self.email = email
        self.api_token = api_token
        self.project_key = project_key
        self.issue_type = issue_type
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for the Jira API."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = httpx.Client(
                        base_url=self.base_url,
                        auth=(self.email, self.api_token),
                        headers={
                            "Accept": "application/json",
                            "Content-Type": "application/json",
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

    def browse_url(self, key: str) -> str:
        """Return the browser URL for a ticket key."""
        return f"{self.base_url}/browse/{key}"

    def create_ticket(self, summary: str, description: str) -> CreatedTicket:
        """Create a ticket in the configured project.

        Args:
            summary: Ticket summary (title)
            description: Ticket description in wiki markup

        Returns:
            The created ticket's key, id, and browse URL

        Raises:
            JiraAuthError: If credentials are rejected
            JiraRequestError: If Jira rejects the fields
            JiraError: If the request fails for any other reason
        """
        payload: dict[str, Any] = {
            "fields": {
                "project": {"key": self.project_key},
                "issuetype": {"name": self.issue_type},
                "summary": summary,
                "description": description,
            }
        }

        logger.info("Creating %s in project %s: %s", self.issue_type, self.project_key, summary)
        try:
            response = self.client.post("/rest/api/2/issue", json=payload)
        except httpx.HTTPError as e:
            logger.error("Jira unreachable: %s", e)
            raise JiraError(f"Jira unreachable: {e}") from e

        if response.status_code in (401, 403):
            logger.error("Jira rejected credentials: %s", response.status_code)
            raise JiraAuthError(
                f"Jira authentication failed: {response.status_code}",
                status_code=response.status_code,
            )
        if response.status_code == 400:
            detail = self._error_detail(response)
            logger.error("Jira rejected ticket fields: %s", detail)
            raise JiraRequestError(f"Jira rejected ticket: {detail}", status_code=400)
        if response.status_code != 201:
            logger.error("Failed to create ticket: %s", response.text)
            raise JiraError(
                f"Failed to create ticket: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            key = data.get("key") or ""
        except (ValueError, AttributeError) as e:
            logger.error("Unreadable Jira reply: %s", truncate_output(response.text, 500))
            raise JiraError(
                f"Unexpected Jira response: {truncate_output(response.text, 500)}",
                status_code=response.status_code,
            ) from e
        if not key:
            raise JiraError(f"Jira response has no ticket key: {data}")

        ticket = CreatedTicket(key=key, id=str(data.get("id", "")), browse_url=self.browse_url(key))
        logger.info("Created ticket %s: %s", ticket.key, ticket.browse_url)
        return ticket

    def publish(self, record: ExtractionRecord, event: IssueEvent) -> CreatedTicket:
        """Create a ticket for an extracted record, titled after the issue."""
        return self.create_ticket(event.title, build_description(record, event))

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        """Flatten Jira's errorMessages/errors body into one string."""
        try:
            data = response.json()
        except ValueError:
            return response.text
        if not isinstance(data, dict):
            return response.text

        parts = list(data.get("errorMessages") or [])
        parts.extend(f"{name}: {message}" for name, message in (data.get("errors") or {}).items())
        return "; ".join(parts) or response.text
