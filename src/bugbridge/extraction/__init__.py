"""Extraction Client - Structured bug records from a hosted completion endpoint."""

from bugbridge.extraction.client import ExtractionClient
from bugbridge.extraction.exceptions import (
    CompletionServiceError,
    ExtractionError,
    PromptError,
    SchemaMismatchError,
)
from bugbridge.extraction.models import ExtractionRecord, Priority
from bugbridge.extraction.prompt import PromptTemplate, load_prompt

__all__ = [
    "CompletionServiceError",
    "ExtractionClient",
    "ExtractionError",
    "ExtractionRecord",
    "Priority",
    "PromptError",
    "PromptTemplate",
    "SchemaMismatchError",
    "load_prompt",
]
