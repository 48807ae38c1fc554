"""SQLAlchemy models for the Run Store."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (SQLite stores no timezone)."""
    return datetime.now(UTC).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class RunRecord(Base):
    """Audit record of one pipeline run.

    Records are never consulted when deciding whether to process an event.
    """

    __tablename__ = "runs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    repo: Mapped[str] = mapped_column(String(255), nullable=False)
    issue_number: Mapped[int] = mapped_column(Integer, nullable=False)
    issue_title: Mapped[str] = mapped_column(String(500), nullable=False)
    issue_url: Mapped[str] = mapped_column(String(500), nullable=False)
    outcome: Mapped[str] = mapped_column(String(20), nullable=False)
    failed_step: Mapped[str | None] = mapped_column(String(20), nullable=True)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    skip_reason: Mapped[str | None] = mapped_column(String(255), nullable=True)
    priority: Mapped[str | None] = mapped_column(String(20), nullable=True)
    ticket_key: Mapped[str | None] = mapped_column(String(50), nullable=True)
    ticket_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    comment_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    def __init__(
        self,
        repo: str,
        issue_number: int,
        issue_title: str,
        outcome: str,
        id: str | None = None,
        issue_url: str = "",
        failed_step: str | None = None,
        error: str | None = None,
        skip_reason: str | None = None,
        priority: str | None = None,
        ticket_key: str | None = None,
        ticket_url: str | None = None,
        comment_url: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.repo = repo
        self.issue_number = issue_number
        self.issue_title = issue_title
        self.issue_url = issue_url
        self.outcome = outcome
        self.failed_step = failed_step
        self.error = error
        self.skip_reason = skip_reason
        self.priority = priority
        self.ticket_key = ticket_key
        self.ticket_url = ticket_url
        self.comment_url = comment_url

    def __repr__(self) -> str:
        return (
            f"<RunRecord(id={self.id!r}, repo={self.repo!r}, "
            f"issue_number={self.issue_number!r}, outcome={self.outcome!r})>"
        )
