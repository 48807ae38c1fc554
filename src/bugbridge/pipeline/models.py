"""Data models for the Pipeline module."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bugbridge.events import IssueEvent
    from bugbridge.extraction import ExtractionRecord
    from bugbridge.github import IssueComment
    from bugbridge.jira import CreatedTicket


class Step(StrEnum):
    """Pipeline steps, in execution order."""

    FILTER = "filter"
    NORMALIZE = "normalize"
    EXTRACT = "extract"
    PUBLISH = "publish"
    NOTIFY = "notify"


class StepStatus(StrEnum):
    """Result of a single step."""

    OK = "ok"
    SKIPPED = "skipped"
    FAILED = "failed"


class RunOutcome(StrEnum):
    """Overall result of a run."""

    SKIPPED = "skipped"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class StepRecord:
    """What happened in one step.

    Attributes:
        step: The step that ran.
        status: Whether it succeeded, skipped the rest of the run, or failed.
        detail: Human-readable note (skip reason or error message).
    """

    step: Step
    status: StepStatus
    detail: str = ""


@dataclass
class RunResult:
    """Result of running the pipeline for one event.

    Attributes:
        event: The event that triggered the run.
        outcome: Overall outcome.
        steps: Step records in execution order.
        normalized_body: Single-line body, once normalized.
        extraction: Extracted record, once extracted.
        ticket: Created ticket, once published.
        comment: Back-reference comment, once posted.
        failed_step: Step that failed, for failed runs.
        error: Error message, for failed runs.
    """

    event: IssueEvent
    outcome: RunOutcome = RunOutcome.COMPLETED
    steps: list[StepRecord] = field(default_factory=list)
    normalized_body: str | None = None
    extraction: ExtractionRecord | None = None
    ticket: CreatedTicket | None = None
    comment: IssueComment | None = None
    failed_step: Step | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """True unless a step failed."""
        return self.outcome != RunOutcome.FAILED

    @property
    def skip_reason(self) -> str | None:
        """Reason the run was skipped, if it was."""
        if self.outcome != RunOutcome.SKIPPED:
            return None
        for record in self.steps:
            if record.status == StepStatus.SKIPPED:
                return record.detail
        return None
