"""Custom exceptions for issue events."""


class EventError(Exception):
    """Base exception for event handling errors."""


class EventPayloadError(EventError):
    """Webhook payload is missing the fields needed to build an event."""
