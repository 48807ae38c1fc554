"""Issue events - parsing and filtering of GitHub "issues" webhooks."""

from bugbridge.events.exceptions import EventError, EventPayloadError
from bugbridge.events.filter import OPENED_ACTION, has_marker_label, should_process
from bugbridge.events.models import IssueEvent

__all__ = [
    "OPENED_ACTION",
    "EventError",
    "EventPayloadError",
    "IssueEvent",
    "has_marker_label",
    "should_process",
]
