"""Shared pytest fixtures and configuration."""

from typing import Any

import pytest

from bugbridge.events import IssueEvent
from bugbridge.extraction import ExtractionRecord, Priority

BUG_BODY = "Button fails on mobile\nSee https://figma.com/file/x\nScreenshot: http://img/1.png"


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")
    config.addinivalue_line("markers", "real: calls real GitHub/Jira/model services (local only)")


# Shared fixtures


@pytest.fixture
def issue_payload() -> dict[str, Any]:
    """A GitHub "issues" webhook payload for a newly opened bug report."""
    return {
        "action": "opened",
        "issue": {
            "number": 42,
            "title": "Checkout button broken",
            "body": BUG_BODY,
            "html_url": "https://github.com/owner/repo/issues/42",
            "labels": [{"name": "bug"}, {"name": "figma"}],
        },
        "repository": {"full_name": "owner/repo"},
    }


@pytest.fixture
def bug_event(issue_payload: dict[str, Any]) -> IssueEvent:
    """The IssueEvent parsed from issue_payload."""
    return IssueEvent.from_payload(issue_payload)


@pytest.fixture
def extraction_record() -> ExtractionRecord:
    """Extraction result for BUG_BODY."""
    return ExtractionRecord(
        content="The checkout button does nothing when tapped on mobile.",
        priority=Priority.CRITICAL,
        figma_urls=["https://figma.com/file/x"],
        attachment_urls=["http://img/1.png"],
    )
