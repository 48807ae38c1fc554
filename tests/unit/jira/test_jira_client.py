"""Unit tests for JiraClient."""

import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import httpx
import pytest

from bugbridge.events import IssueEvent
from bugbridge.extraction import ExtractionRecord
from bugbridge.jira import (
    CreatedTicket,
    JiraAuthError,
    JiraClient,
    JiraError,
    JiraRequestError,
)


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock HTTP client."""
    return MagicMock()


@pytest.fixture
def jira(mock_client: MagicMock) -> JiraClient:
    """Create a JiraClient with mocked client."""
    client = JiraClient(
        base_url="https://example.atlassian.net/",
        email="bot@example.com",
        api_token="jira-token",
        project_key="BUG",
    )
    client._client = mock_client
    return client


def _mock_response(status_code: int, data: dict | None = None, text: str = "") -> MagicMock:
    """Create a mock HTTP response."""
    response = MagicMock()
    response.status_code = status_code
    if data is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = data
    response.text = text or str(data)
    return response


@pytest.mark.unit
class TestCreateTicket:
    """Tests for create_ticket."""

    def test_created(self, jira: JiraClient, mock_client: MagicMock) -> None:
        """A 201 response yields the ticket key and browse URL."""
        mock_client.post.return_value = _mock_response(201, {"id": "10001", "key": "BUG-1"})

        ticket = jira.create_ticket("Checkout button broken", "desc")

        assert ticket == CreatedTicket(
            key="BUG-1", id="10001", browse_url="https://example.atlassian.net/browse/BUG-1"
        )

    def test_payload_fields(self, jira: JiraClient, mock_client: MagicMock) -> None:
        """Project, issue type, summary, and description are sent to /rest/api/2/issue."""
        mock_client.post.return_value = _mock_response(201, {"id": "1", "key": "BUG-1"})

        jira.create_ticket("Checkout button broken", "desc")

        path = mock_client.post.call_args[0][0]
        fields = mock_client.post.call_args[1]["json"]["fields"]
        assert path == "/rest/api/2/issue"
        assert fields == {
            "project": {"key": "BUG"},
            "issuetype": {"name": "Bug"},
            "summary": "Checkout button broken",
            "description": "desc",
        }

    @pytest.mark.parametrize("status_code", [401, 403])
    def test_auth_failure(
        self, jira: JiraClient, mock_client: MagicMock, status_code: int
    ) -> None:
        """Rejected credentials raise JiraAuthError."""
        mock_client.post.return_value = _mock_response(status_code, text="Unauthorized")

        with pytest.raises(JiraAuthError) as exc_info:
            jira.create_ticket("s", "d")

        assert exc_info.value.status_code == status_code

    def test_rejected_fields(self, jira: JiraClient, mock_client: MagicMock) -> None:
        """A 400 reports Jira's field errors."""
        mock_client.post.return_value = _mock_response(
            400,
            {"errorMessages": [], "errors": {"issuetype": "Specify a valid issue type"}},
        )

        with pytest.raises(JiraRequestError, match="issuetype: Specify a valid issue type"):
            jira.create_ticket("s", "d")

    def test_rejected_without_json(self, jira: JiraClient, mock_client: MagicMock) -> None:
        """A 400 without a JSON body falls back to the response text."""
        mock_client.post.return_value = _mock_response(400, text="Bad Request")

        with pytest.raises(JiraRequestError, match="Bad Request"):
            jira.create_ticket("s", "d")

    def test_rejected_with_non_object_json(self, jira: JiraClient, mock_client: MagicMock) -> None:
        """A 400 whose JSON body isn't an object falls back to the response text."""
        response = _mock_response(400, text='["bad"]')
        response.json.side_effect = None
        response.json.return_value = ["bad"]
        mock_client.post.return_value = response

        with pytest.raises(JiraRequestError, match="bad"):
            jira.create_ticket("s", "d")

    def test_other_status(self, jira: JiraClient, mock_client: MagicMock) -> None:
        """Unexpected statuses raise JiraError."""
        mock_client.post.return_value = _mock_response(500, text="Internal error")

        with pytest.raises(JiraError) as exc_info:
            jira.create_ticket("s", "d")

        assert exc_info.value.status_code == 500

    def test_unreachable(self, jira: JiraClient, mock_client: MagicMock) -> None:
        """Transport errors raise JiraError."""
        mock_client.post.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(JiraError, match="unreachable"):
            jira.create_ticket("s", "d")

    def test_missing_key(self, jira: JiraClient, mock_client: MagicMock) -> None:
        """A 201 without a key is an error."""
        mock_client.post.return_value = _mock_response(201, {"id": "1"})

        with pytest.raises(JiraError, match="no ticket key"):
            jira.create_ticket("s", "d")

    def test_created_without_json(self, jira: JiraClient, mock_client: MagicMock) -> None:
        """A 201 whose body isn't JSON raises JiraError with the body text."""
        mock_client.post.return_value = _mock_response(201, text="<html>ok</html>")

        with pytest.raises(JiraError, match="Unexpected Jira response: <html>ok") as exc_info:
            jira.create_ticket("s", "d")

        assert exc_info.value.status_code == 201


@pytest.mark.unit
class TestPublish:
    """Tests for publish."""

    def test_uses_issue_title_and_description(
        self,
        jira: JiraClient,
        mock_client: MagicMock,
        extraction_record: ExtractionRecord,
        bug_event: IssueEvent,
    ) -> None:
        """The ticket summary is the issue title and the description is formatted."""
        mock_client.post.return_value = _mock_response(201, {"id": "1", "key": "BUG-1"})

        ticket = jira.publish(extraction_record, bug_event)

        fields = mock_client.post.call_args[1]["json"]["fields"]
        assert fields["summary"] == "Checkout button broken"
        assert fields["description"].startswith("*Priority:* Critical")
        assert ticket.key == "BUG-1"
        mock_client.post.assert_called_once()


@pytest.mark.unit
class TestClientSetup:
    """Tests for client construction."""

    def test_browse_url(self) -> None:
        """Browse URLs are built from the site URL."""
        client = JiraClient("https://example.atlassian.net/", "e", "t", "BUG")

        assert client.browse_url("BUG-3") == "https://example.atlassian.net/browse/BUG-3"

    def test_close(self, jira: JiraClient, mock_client: MagicMock) -> None:
        """close() releases the HTTP client."""
        jira.close()

        mock_client.close.assert_called_once()
        assert jira._client is None

    def test_concurrent_first_use_builds_one_client(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Threads racing on first use share a single HTTP client."""
        built: list[MagicMock] = []

        def slow_client(**kwargs: object) -> MagicMock:
            time.sleep(0.05)
            built.append(MagicMock())
            return built[-1]

        monkeypatch.setattr(httpx, "Client", slow_client)
        client = JiraClient("https://example.atlassian.net", "e", "t", "BUG")

        with ThreadPoolExecutor(max_workers=8) as pool:
            seen = list(pool.map(lambda _: client.client, range(8)))

        assert len(built) == 1
        assert all(http is built[0] for http in seen)

    def test_client_rebuilt_after_close(self, jira: JiraClient, mock_client: MagicMock) -> None:
        """Using the client after close() creates a fresh one."""
        jira.close()

        http = jira.client
        try:
            assert http is not mock_client
            assert http.headers["Accept"] == "application/json"
        finally:
            jira.close()
