"""Pipeline - Runs one issue event through filter, extraction, ticket, and comment."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, TypeVar

from bugbridge.events import OPENED_ACTION, should_process
from bugbridge.extraction import ExtractionError
from bugbridge.github import GitHubError
from bugbridge.jira import JiraError
from bugbridge.normalizer import normalize_body
from bugbridge.pipeline.exceptions import PipelineError
from bugbridge.pipeline.models import RunOutcome, RunResult, Step, StepRecord, StepStatus

if TYPE_CHECKING:
    from bugbridge.config import Settings
    from bugbridge.events import IssueEvent
    from bugbridge.extraction import ExtractionRecord
    from bugbridge.github import IssueComment
    from bugbridge.jira import CreatedTicket

logger = logging.getLogger("bugbridge.pipeline")

T = TypeVar("T")

# Errors that end a run as FAILED instead of propagating
STEP_ERRORS: dict[Step, type[Exception]] = {
    Step.EXTRACT: ExtractionError,
    Step.PUBLISH: JiraError,
    Step.NOTIFY: GitHubError,
}


class Extractor(Protocol):
    """Interface for the extraction step."""

    def extract(self, body: str) -> ExtractionRecord:
        """Extract a structured record from a normalized body."""
        ...


class Publisher(Protocol):
    """Interface for the ticket publishing step."""

    def publish(self, record: ExtractionRecord, event: IssueEvent) -> CreatedTicket:
        """Create a ticket for the record."""
        ...


class Notifier(Protocol):
    """Interface for the back-reference step."""

    def notify(self, repo: str, issue_number: int, ticket: CreatedTicket) -> IssueComment:
        """Comment on the issue with a link to the ticket."""
        ...


class Pipeline:
    """Linear issue-to-ticket pipeline.

    Steps run in a fixed order and the run stops at the first skip or
    failure, so a ticket is only created after a valid extraction and the
    issue is only commented on after a ticket exists. Nothing is retried and
    nothing is rolled back. Runs share no state, so re-delivering an event
    creates another ticket.
    """

    def __init__(
        self,
        extractor: Extractor,
        publisher: Publisher,
        notifier: Notifier,
        marker_label: str = "bug",
    ) -> None:
        """Initialize the Pipeline.

        Args:
            extractor: Client for the extraction step.
            publisher: Client for the ticket publishing step.
            notifier: Client for the back-reference step.
            marker_label: Label an issue must carry to be processed.
        """
        self.extractor = extractor
        self.publisher = publisher
        self.notifier = notifier
        self.marker_label = marker_label

    @classmethod
    def from_settings(cls, settings: Settings) -> Pipeline:
        """Build a pipeline with real HTTP clients.

        Raises:
            ConfigError: If any required setting is missing.
        """
        from bugbridge.extraction import ExtractionClient, load_prompt  # noqa: PLC0415
        from bugbridge.github import GitHubClient  # noqa: PLC0415
        from bugbridge.jira import JiraClient  # noqa: PLC0415

        settings.validate()

        extractor = ExtractionClient(
            endpoint=settings.model.endpoint,
            token=settings.model.token,
            prompt=load_prompt(settings.model.prompt_file),
            model=settings.model.model,
        )
        publisher = JiraClient(
            base_url=settings.jira.base_url,
            email=settings.jira.email,
            api_token=settings.jira.api_token,
            project_key=settings.jira.project_key,
            issue_type=settings.jira.issue_type,
        )
        notifier = GitHubClient(token=settings.github.token, base_url=settings.github.api_url)
        return cls(extractor, publisher, notifier, marker_label=settings.marker_label)

    def close(self) -> None:
        """Close any clients that hold HTTP connections."""
        for component in (self.extractor, self.publisher, self.notifier):
            close = getattr(component, "close", None)
            if callable(close):
                close()

    def run(self, event: IssueEvent) -> RunResult:
        """Run the pipeline for one event.

        Args:
            event: The incoming issue event.

        Returns:
            RunResult describing which steps ran and how the run ended.

        Raises:
            PipelineError: If a step fails with an unexpected error.
        """
        result = RunResult(event=event)
        logger.info("Run started for %s#%d: %s", event.repo, event.number, event.title)

        if not should_process(event, self.marker_label):
            reason = (
                f"action is {event.action!r}"
                if event.action != OPENED_ACTION
                else f"missing {self.marker_label!r} label"
            )
            return self._skip(result, Step.FILTER, reason)
        result.steps.append(StepRecord(Step.FILTER, StepStatus.OK))

        body = normalize_body(event.body)
        if not body:
            return self._skip(result, Step.NORMALIZE, "issue body is empty")
        result.normalized_body = body
        result.steps.append(StepRecord(Step.NORMALIZE, StepStatus.OK))

        record = self._run_step(result, Step.EXTRACT, lambda: self.extractor.extract(body))
        if record is None:
            return result
        result.extraction = record

        ticket = self._run_step(result, Step.PUBLISH, lambda: self.publisher.publish(record, event))
        if ticket is None:
            return result
        result.ticket = ticket

        if not ticket.key or not ticket.browse_url:
            result.steps.append(
                StepRecord(Step.NOTIFY, StepStatus.SKIPPED, "ticket has no key or browse URL")
            )
            logger.warning("Ticket for issue #%d has no key or URL, not commenting", event.number)
            return self._complete(result)

        comment = self._run_step(
            result, Step.NOTIFY, lambda: self.notifier.notify(event.repo, event.number, ticket)
        )
        if comment is None:
            return result
        result.comment = comment

        return self._complete(result)

    def _run_step(self, result: RunResult, step: Step, action: Callable[[], T]) -> T | None:
        """Run one external step, recording success or the expected failure.

        Returns:
            The step's value, or None if the step failed.
        """
        expected = STEP_ERRORS[step]
        try:
            value = action()
        except expected as e:
            return self._fail(result, step, e)
        except Exception as e:
            logger.exception("Unexpected error in %s step for issue #%d", step, result.event.number)
            raise PipelineError(f"Unexpected error in {step} step: {e}") from e

        result.steps.append(StepRecord(step, StepStatus.OK))
        return value

    def _skip(self, result: RunResult, step: Step, reason: str) -> RunResult:
        result.steps.append(StepRecord(step, StepStatus.SKIPPED, reason))
        result.outcome = RunOutcome.SKIPPED
        logger.info("Run skipped for issue #%d: %s", result.event.number, reason)
        return result

    def _fail(self, result: RunResult, step: Step, error: Exception) -> None:
        result.steps.append(StepRecord(step, StepStatus.FAILED, str(error)))
        result.outcome = RunOutcome.FAILED
        result.failed_step = step
        result.error = str(error)
        logger.error("Run failed at %s for issue #%d: %s", step, result.event.number, error)
        return None

    def _complete(self, result: RunResult) -> RunResult:
        result.outcome = RunOutcome.COMPLETED
        logger.info(
            "Run completed for issue #%d: %s",
            result.event.number,
            result.ticket.key if result.ticket else "no ticket",
        )
        return result
