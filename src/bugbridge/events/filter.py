"""Marker-label gate for incoming issue events."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bugbridge.events.models import IssueEvent

logger = logging.getLogger("bugbridge.events")

OPENED_ACTION = "opened"


def has_marker_label(event: IssueEvent, marker_label: str) -> bool:
    """Check whether the event carries the marker label (case-sensitive)."""
    return marker_label in event.labels


def should_process(event: IssueEvent, marker_label: str) -> bool:
    """Decide whether an event enters the pipeline.

    Only newly opened issues carrying the marker label qualify. Anything else
    is a normal skip, not an error.

    Args:
        event: The incoming issue event.
        marker_label: Label that gates processing.

    Returns:
        True if the event should be processed.
    """
    if event.action != OPENED_ACTION:
        logger.debug("Skipping issue #%d: action is %r", event.number, event.action)
        return False
    if not has_marker_label(event, marker_label):
        logger.debug("Skipping issue #%d: no %r label", event.number, marker_label)
        return False
    return True
