"""Custom exceptions for the extraction client."""


class ExtractionError(Exception):
    """Base exception for extraction errors."""


class PromptError(ExtractionError):
    """Prompt file is missing, unreadable, or incomplete."""


class CompletionServiceError(ExtractionError):
    """Completion endpoint unreachable, rejected the request, or returned no content."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SchemaMismatchError(ExtractionError):
    """Completion content does not match the extraction record schema."""
