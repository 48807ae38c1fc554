"""Pydantic models for REST API."""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from bugbridge.pipeline import RunResult

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str
    version: str


class StepResponse(BaseModel):
    """Response model for one pipeline step."""

    step: str
    status: str
    detail: str = ""


class WebhookResponse(BaseModel):
    """Response model for a handled webhook delivery."""

    outcome: str
    run_id: str | None = None
    repo: str | None = None
    issue_number: int | None = None
    skip_reason: str | None = None
    failed_step: str | None = None
    error: str | None = None
    priority: str | None = None
    ticket_key: str | None = None
    ticket_url: str | None = None
    comment_url: str | None = None
    steps: list[StepResponse] = []


def run_result_to_response(result: "RunResult", run_id: str | None = None) -> WebhookResponse:
    """Convert a RunResult to WebhookResponse."""
    return WebhookResponse(
        outcome=result.outcome.value,
        run_id=run_id,
        repo=result.event.repo,
        issue_number=result.event.number,
        skip_reason=result.skip_reason,
        failed_step=result.failed_step.value if result.failed_step else None,
        error=result.error,
        priority=result.extraction.priority.value if result.extraction else None,
        ticket_key=result.ticket.key if result.ticket else None,
        ticket_url=result.ticket.browse_url if result.ticket else None,
        comment_url=result.comment.url if result.comment else None,
        steps=[
            StepResponse(step=record.step.value, status=record.status.value, detail=record.detail)
            for record in result.steps
        ],
    )


class RunResponse(BaseModel):
    """Response model for a stored run."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    repo: str
    issue_number: int
    issue_title: str
    issue_url: str
    outcome: str
    failed_step: str | None
    error: str | None
    skip_reason: str | None
    priority: str | None
    ticket_key: str | None
    ticket_url: str | None
    comment_url: str | None
    created_at: datetime


def run_to_response(run: Any) -> RunResponse:
    """Convert a RunRecord model to RunResponse."""
    return RunResponse.model_validate(run)
