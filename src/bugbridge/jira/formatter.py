"""Jira wiki-markup description for an extracted bug record."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bugbridge.events import IssueEvent
    from bugbridge.extraction import ExtractionRecord

EMPTY_SECTION = "None"


def _lines(items: list[str]) -> str:
    return "\n".join(items) if items else EMPTY_SECTION


def build_description(record: ExtractionRecord, event: IssueEvent) -> str:
    """Render the ticket description.

    Sections always appear in the same order: Priority, GitHub issue,
    Summary, Figma Links, Attachments. Attachments are embedded as images.

    Args:
        record: Extracted bug record.
        event: The originating issue event.

    Returns:
        Description in Jira wiki markup.
    """
    issue_link = f"[#{event.number}|{event.url}]" if event.url else f"#{event.number}"
    attachments = [f"!{url}!" for url in record.attachment_urls]

    sections = [
        f"*Priority:* {record.priority}",
        f"*GitHub issue:* {issue_link}",
        f"*Summary:*\n{record.content}",
        f"*Figma Links:*\n{_lines(record.figma_urls)}",
        f"*Attachments:*\n{_lines(attachments)}",
    ]
    return "\n\n".join(sections)
