"""Data models for extraction results."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class Priority(StrEnum):
    """Bug priority assigned by the extraction model."""

    CRITICAL = "Critical"
    NON_CRITICAL = "Non-Critical"
    COSMETIC = "Cosmetic"
    NICE_TO_HAVE = "Nice to have"


class ExtractionRecord(BaseModel):
    """Structured bug record extracted from an issue body."""

    model_config = ConfigDict(extra="forbid")

    content: str
    priority: Priority
    figma_urls: list[str]
    attachment_urls: list[str]
