"""ExtractionClient - Turns a normalized issue body into an ExtractionRecord."""

from __future__ import annotations

import json
import logging
import threading
from typing import Any

import httpx
from pydantic import ValidationError

from bugbridge.extraction.exceptions import CompletionServiceError, SchemaMismatchError
from bugbridge.extraction.models import ExtractionRecord
from bugbridge.extraction.prompt import PromptTemplate, load_prompt
from bugbridge.logging import truncate_output

logger = logging.getLogger("bugbridge.extraction")


class ExtractionClient:
    """Client for an OpenAI-compatible chat completion endpoint.

    Sends one request per body using a fixed prompt and JSON schema, then
    validates the returned content against ExtractionRecord. There is no
    retry: any failure is reported to the caller.
    """

    def __init__(
        self,
        endpoint: str,
        token: str,
        prompt: PromptTemplate | None = None,
        model: str | None = None,
    ) -> None:
        """Initialize the Extraction Client.

        Args:
            endpoint: Base URL of the inference API (``/chat/completions`` is appended)
            token: Bearer token for the endpoint
            prompt: Prompt template. Defaults to the bundled bug report prompt.
            model: Model override. Defaults to the prompt's model.
        """
        self.endpoint = endpoint.rstrip("/")
        self.token = token
        self.prompt = prompt if prompt is not None else load_prompt()
        self.model = model or self.prompt.model
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for the completion endpoint."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = httpx.Client(
                        base_url=self.endpoint,
                        headers={
                            "Authorization": f"Bearer {self.token}",
                            "Content-Type": "application/json",
                        },
                        timeout=30.0,
                    )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def build_request(self, body: str) -> dict[str, Any]:
        """Build the chat completion request payload for a normalized body."""
        return {
            "model": self.model,
            "messages": self.prompt.render(body=body),
            "temperature": self.prompt.temperature,
            "response_format": self.prompt.response_format(),
        }

    def extract(self, body: str) -> ExtractionRecord:
        """Extract a structured record from a normalized issue body.

        Args:
            body: Single-line issue body

        Returns:
            The validated ExtractionRecord

        Raises:
            CompletionServiceError: If the endpoint fails or returns no content
            SchemaMismatchError: If the content doesn't match the record schema
        """
        logger.info("Requesting extraction from %s (model=%s)", self.endpoint, self.model)

        try:
            response = self.client.post("/chat/completions", json=self.build_request(body))
        except httpx.HTTPError as e:
            logger.error("Completion endpoint unreachable: %s", e)
            raise CompletionServiceError(f"Completion endpoint unreachable: {e}") from e

        if response.status_code != 200:
            logger.error(
                "Completion request failed: %s %s",
                response.status_code,
                truncate_output(response.text, 500),
            )
            raise CompletionServiceError(
                f"Completion request failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        content = self._message_content(response)
        logger.debug("Completion content: %s", truncate_output(content, 1000))

        record = self.parse_record(content)
        logger.info(
            "Extracted record (priority=%s, figma=%d, attachments=%d)",
            record.priority,
            len(record.figma_urls),
            len(record.attachment_urls),
        )
        return record

    @staticmethod
    def parse_record(content: str) -> ExtractionRecord:
        """Parse and validate completion content as an ExtractionRecord.

        Raises:
            SchemaMismatchError: If the content is not JSON or fails validation
        """
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise SchemaMismatchError(f"Completion content is not valid JSON: {e}") from e

        try:
            return ExtractionRecord.model_validate(data)
        except ValidationError as e:
            raise SchemaMismatchError(f"Completion content does not match schema: {e}") from e

    @staticmethod
    def _message_content(response: httpx.Response) -> str:
        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise CompletionServiceError(
                f"Unexpected completion response: {truncate_output(response.text, 500)}"
            ) from e

        if not isinstance(content, str) or not content:
            raise CompletionServiceError("Completion response has no message content")
        return content
