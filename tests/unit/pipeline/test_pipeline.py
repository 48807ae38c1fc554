"""Unit tests for Pipeline."""

from dataclasses import replace
from typing import Any
from unittest.mock import MagicMock

import pytest

from bugbridge.config import ConfigError, Settings
from bugbridge.events import IssueEvent
from bugbridge.extraction import (
    CompletionServiceError,
    ExtractionRecord,
    SchemaMismatchError,
)
from bugbridge.github import CommentError, GitHubClient, IssueComment
from bugbridge.jira import CreatedTicket, JiraAuthError, JiraClient
from bugbridge.pipeline import (
    Pipeline,
    PipelineError,
    RunOutcome,
    Step,
    StepStatus,
)

TICKET = CreatedTicket(
    key="BUG-1", id="10001", browse_url="https://example.atlassian.net/browse/BUG-1"
)
COMMENT = IssueComment(id=99, url="https://github.com/owner/repo/issues/42#issuecomment-99")


@pytest.fixture
def components(extraction_record: ExtractionRecord) -> MagicMock:
    """Mock extractor, publisher, and notifier sharing one parent for call order."""
    parent = MagicMock()
    parent.extractor.extract.return_value = extraction_record
    parent.publisher.publish.return_value = TICKET
    parent.notifier.notify.return_value = COMMENT
    return parent


@pytest.fixture
def pipeline(components: MagicMock) -> Pipeline:
    """Create a Pipeline over mocked components."""
    return Pipeline(components.extractor, components.publisher, components.notifier)


def _statuses(result: Any) -> list[tuple[Step, StepStatus]]:
    return [(record.step, record.status) for record in result.steps]


@pytest.mark.unit
class TestFilter:
    """Tests for the marker-label gate."""

    def test_unlabelled_issue_makes_no_calls(
        self, pipeline: Pipeline, components: MagicMock, bug_event: IssueEvent
    ) -> None:
        """An issue without the marker label never reaches any external service."""
        event = replace(bug_event, labels=["enhancement"])

        result = pipeline.run(event)

        assert result.outcome == RunOutcome.SKIPPED
        assert result.skip_reason == "missing 'bug' label"
        assert components.mock_calls == []

    def test_non_opened_action_skipped(
        self, pipeline: Pipeline, components: MagicMock, bug_event: IssueEvent
    ) -> None:
        """Only newly opened issues are processed."""
        event = replace(bug_event, action="labeled")

        result = pipeline.run(event)

        assert result.outcome == RunOutcome.SKIPPED
        assert result.skip_reason == "action is 'labeled'"
        assert components.mock_calls == []

    def test_label_match_is_case_sensitive(
        self, pipeline: Pipeline, components: MagicMock, bug_event: IssueEvent
    ) -> None:
        """Label "Bug" does not match the "bug" marker."""
        result = pipeline.run(replace(bug_event, labels=["Bug"]))

        assert result.outcome == RunOutcome.SKIPPED
        assert components.mock_calls == []

    def test_custom_marker_label(self, components: MagicMock, bug_event: IssueEvent) -> None:
        """The marker label is configurable."""
        pipeline = Pipeline(
            components.extractor, components.publisher, components.notifier, marker_label="defect"
        )

        result = pipeline.run(replace(bug_event, labels=["defect"]))

        assert result.outcome == RunOutcome.COMPLETED


@pytest.mark.unit
class TestNormalize:
    """Tests for the normalize step."""

    def test_body_is_single_line(
        self, pipeline: Pipeline, components: MagicMock, bug_event: IssueEvent
    ) -> None:
        """The extractor receives the body with line breaks collapsed."""
        result = pipeline.run(bug_event)

        body = components.extractor.extract.call_args[0][0]
        assert "\n" not in body
        assert body == (
            "Button fails on mobile See https://figma.com/file/x Screenshot: http://img/1.png"
        )
        assert result.normalized_body == body

    @pytest.mark.parametrize("body", ["", "   \n\t  "])
    def test_empty_body_skipped(
        self, pipeline: Pipeline, components: MagicMock, bug_event: IssueEvent, body: str
    ) -> None:
        """A body with no text is skipped before extraction."""
        result = pipeline.run(replace(bug_event, body=body))

        assert result.outcome == RunOutcome.SKIPPED
        assert result.skip_reason == "issue body is empty"
        assert _statuses(result)[-1] == (Step.NORMALIZE, StepStatus.SKIPPED)
        components.extractor.extract.assert_not_called()


@pytest.mark.unit
class TestSuccessfulRun:
    """Tests for a run where every step succeeds."""

    def test_steps_run_once_in_order(
        self, pipeline: Pipeline, components: MagicMock, bug_event: IssueEvent
    ) -> None:
        """Extraction, ticket creation, and comment happen once each, in order."""
        pipeline.run(bug_event)

        names = [call[0] for call in components.mock_calls]
        assert names == ["extractor.extract", "publisher.publish", "notifier.notify"]

    def test_result(
        self,
        pipeline: Pipeline,
        components: MagicMock,
        bug_event: IssueEvent,
        extraction_record: ExtractionRecord,
    ) -> None:
        """The result carries every intermediate value."""
        result = pipeline.run(bug_event)

        assert result.outcome == RunOutcome.COMPLETED
        assert result.succeeded
        assert result.extraction == extraction_record
        assert result.ticket == TICKET
        assert result.comment == COMMENT
        assert result.failed_step is None
        assert _statuses(result) == [
            (Step.FILTER, StepStatus.OK),
            (Step.NORMALIZE, StepStatus.OK),
            (Step.EXTRACT, StepStatus.OK),
            (Step.PUBLISH, StepStatus.OK),
            (Step.NOTIFY, StepStatus.OK),
        ]

    def test_publish_and_notify_arguments(
        self,
        pipeline: Pipeline,
        components: MagicMock,
        bug_event: IssueEvent,
        extraction_record: ExtractionRecord,
    ) -> None:
        """The ticket is built from the record and the comment targets the issue."""
        pipeline.run(bug_event)

        components.publisher.publish.assert_called_once_with(extraction_record, bug_event)
        components.notifier.notify.assert_called_once_with("owner/repo", 42, TICKET)

    def test_redelivery_creates_second_ticket(
        self, pipeline: Pipeline, components: MagicMock, bug_event: IssueEvent
    ) -> None:
        """Runs share no state, so the same event is processed twice."""
        pipeline.run(bug_event)
        pipeline.run(bug_event)

        assert components.publisher.publish.call_count == 2

    def test_ticket_without_key_skips_comment(
        self, pipeline: Pipeline, components: MagicMock, bug_event: IssueEvent
    ) -> None:
        """No comment is posted when the ticket has no key or URL."""
        components.publisher.publish.return_value = CreatedTicket(key="", id="", browse_url="")

        result = pipeline.run(bug_event)

        assert result.outcome == RunOutcome.COMPLETED
        assert _statuses(result)[-1] == (Step.NOTIFY, StepStatus.SKIPPED)
        components.notifier.notify.assert_not_called()


@pytest.mark.unit
class TestFailedRun:
    """Tests for runs that stop at a failing step."""

    def test_schema_mismatch_stops_before_publish(
        self, pipeline: Pipeline, components: MagicMock, bug_event: IssueEvent
    ) -> None:
        """A record missing priority never reaches Jira."""
        components.extractor.extract.side_effect = SchemaMismatchError(
            "Completion content does not match schema: priority Field required"
        )

        result = pipeline.run(bug_event)

        assert result.outcome == RunOutcome.FAILED
        assert not result.succeeded
        assert result.failed_step == Step.EXTRACT
        assert "priority" in result.error
        components.publisher.publish.assert_not_called()
        components.notifier.notify.assert_not_called()

    def test_extraction_service_error(
        self, pipeline: Pipeline, components: MagicMock, bug_event: IssueEvent
    ) -> None:
        """An unavailable model fails the run without retrying."""
        components.extractor.extract.side_effect = CompletionServiceError(
            "Completion request failed: 429", status_code=429
        )

        result = pipeline.run(bug_event)

        assert result.failed_step == Step.EXTRACT
        components.extractor.extract.assert_called_once()

    def test_publish_failure_posts_no_comment(
        self, pipeline: Pipeline, components: MagicMock, bug_event: IssueEvent
    ) -> None:
        """When Jira rejects the ticket no comment is posted."""
        components.publisher.publish.side_effect = JiraAuthError(
            "Jira authentication failed: 401", status_code=401
        )

        result = pipeline.run(bug_event)

        assert result.outcome == RunOutcome.FAILED
        assert result.failed_step == Step.PUBLISH
        assert result.ticket is None
        components.notifier.notify.assert_not_called()

    def test_comment_failure_keeps_ticket(
        self, pipeline: Pipeline, components: MagicMock, bug_event: IssueEvent
    ) -> None:
        """A failed comment is reported but the created ticket is kept."""
        components.notifier.notify.side_effect = CommentError("Failed to comment: 403")

        result = pipeline.run(bug_event)

        assert result.outcome == RunOutcome.FAILED
        assert result.failed_step == Step.NOTIFY
        assert result.ticket == TICKET
        assert result.comment is None

    def test_unexpected_error_raises(
        self, pipeline: Pipeline, components: MagicMock, bug_event: IssueEvent
    ) -> None:
        """Errors outside a step's expected family propagate as PipelineError."""
        components.publisher.publish.side_effect = KeyError("fields")

        with pytest.raises(PipelineError, match="publish"):
            pipeline.run(bug_event)

        components.notifier.notify.assert_not_called()


@pytest.mark.unit
class TestFromSettings:
    """Tests for Pipeline.from_settings."""

    def test_missing_settings_raise(self) -> None:
        """Incomplete configuration fails before any client is built."""
        settings = Settings.from_mapping({"GITHUB_TOKEN": "gh-token"})

        with pytest.raises(ConfigError, match="JIRA_BASE_URL"):
            Pipeline.from_settings(settings)

    def test_builds_clients(self) -> None:
        """Complete settings produce real clients."""
        settings = Settings.from_mapping(
            {
                "JIRA_BASE_URL": "https://example.atlassian.net",
                "JIRA_USER_EMAIL": "bot@example.com",
                "JIRA_PROJECT_KEY": "BUG",
                "JIRA_API_TOKEN": "jira-token",
                "GITHUB_TOKEN": "gh-token",
                "BUGBRIDGE_MARKER_LABEL": "defect",
            }
        )

        pipeline = Pipeline.from_settings(settings)

        assert isinstance(pipeline.publisher, JiraClient)
        assert isinstance(pipeline.notifier, GitHubClient)
        assert pipeline.publisher.project_key == "BUG"
        assert pipeline.extractor.token == "gh-token"
        assert pipeline.marker_label == "defect"
        pipeline.close()

    def test_close_closes_components(self, pipeline: Pipeline, components: MagicMock) -> None:
        """close() closes every component that has a close method."""
        pipeline.close()

        components.extractor.close.assert_called_once()
        components.publisher.close.assert_called_once()
        components.notifier.close.assert_called_once()
