"""Data models for issue events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from bugbridge.events.exceptions import EventPayloadError


@dataclass(frozen=True)
class IssueEvent:
    """An "issues" webhook event for a single GitHub issue.

    Attributes:
        action: Webhook action (e.g. "opened", "edited").
        repo: Repository in "owner/repo" format.
        number: Issue number.
        title: Issue title.
        body: Raw issue body, "" when the issue has none.
        labels: Label names attached to the issue.
        url: Browser URL of the issue.
    """

    action: str
    repo: str
    number: int
    title: str
    body: str
    url: str
    labels: list[str] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> IssueEvent:
        """Build an event from a GitHub "issues" webhook payload.

        Args:
            payload: Decoded webhook JSON.

        Returns:
            The parsed IssueEvent.

        Raises:
            EventPayloadError: If the issue or repository is missing.
        """
        if not isinstance(payload, dict):
            raise EventPayloadError(f"Payload must be a JSON object, got {type(payload).__name__}")

        issue = payload.get("issue")
        if not isinstance(issue, dict):
            raise EventPayloadError("Payload has no 'issue' object")

        repository = payload.get("repository")
        repo = repository.get("full_name") if isinstance(repository, dict) else None
        if not repo or not isinstance(repo, str):
            raise EventPayloadError("Payload has no 'repository.full_name'")

        try:
            number = int(issue["number"])
        except (KeyError, TypeError, ValueError) as e:
            raise EventPayloadError("Issue has no valid 'number'") from e

        # Webhooks send label objects; some CI hosts flatten them to names
        raw_labels = issue.get("labels") or []
        if not isinstance(raw_labels, list):
            raise EventPayloadError("Issue 'labels' must be a list")
        labels = []
        for label in raw_labels:
            name = label.get("name") if isinstance(label, dict) else label
            if name:
                labels.append(str(name))

        return cls(
            action=payload.get("action") or "",
            repo=repo,
            number=number,
            title=issue.get("title") or "",
            body=issue.get("body") or "",
            url=issue.get("html_url") or "",
            labels=labels,
        )
