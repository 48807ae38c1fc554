"""Prompt file loading for the extraction client.

Prompt files use the ``.prompt.yml`` layout understood by GitHub Models:
a model name, model parameters, chat messages with ``{{name}}`` placeholders
and a JSON schema for the response.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from bugbridge.extraction.exceptions import PromptError

DEFAULT_PROMPT_PATH = Path(__file__).resolve().parent.parent / "prompts" / "bug_report.prompt.yml"
DEFAULT_TEMPERATURE = 0.5

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


@dataclass
class PromptMessage:
    """One chat message template."""

    role: str
    content: str


@dataclass
class PromptTemplate:
    """A parsed prompt file.

    Attributes:
        name: Human-readable prompt name.
        model: Model identifier sent to the completion endpoint.
        messages: Chat message templates.
        json_schema: The ``json_schema`` response format object.
        temperature: Sampling temperature.
    """

    name: str
    model: str
    messages: list[PromptMessage]
    json_schema: dict[str, Any]
    temperature: float = DEFAULT_TEMPERATURE
    source: Path | None = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Path | None = None) -> PromptTemplate:
        """Create a template from a decoded prompt file.

        Raises:
            PromptError: If required keys are missing or malformed.
        """
        required_fields = ["name", "model", "messages", "jsonSchema"]
        missing = [f for f in required_fields if not data.get(f)]
        if missing:
            raise PromptError(f"Prompt is missing required fields: {', '.join(missing)}")

        response_format = data.get("responseFormat", "json_schema")
        if response_format != "json_schema":
            raise PromptError(f"Unsupported responseFormat: {response_format!r}")

        messages = []
        for raw in data["messages"]:
            if not isinstance(raw, dict) or "role" not in raw or "content" not in raw:
                raise PromptError(f"Malformed prompt message: {raw!r}")
            messages.append(PromptMessage(role=str(raw["role"]), content=str(raw["content"])))

        schema = data["jsonSchema"]
        if isinstance(schema, str):
            try:
                schema = json.loads(schema)
            except json.JSONDecodeError as e:
                raise PromptError(f"jsonSchema is not valid JSON: {e}") from e
        if not isinstance(schema, dict) or "schema" not in schema:
            raise PromptError("jsonSchema must be an object with a 'schema' key")

        parameters = data.get("modelParameters") or {}
        try:
            temperature = float(parameters.get("temperature", DEFAULT_TEMPERATURE))
        except (TypeError, ValueError) as e:
            raise PromptError(f"Invalid temperature: {parameters.get('temperature')!r}") from e

        return cls(
            name=str(data["name"]),
            model=str(data["model"]),
            messages=messages,
            json_schema=schema,
            temperature=temperature,
            source=source,
        )

    def render(self, **variables: str) -> list[dict[str, str]]:
        """Render the chat messages, substituting ``{{name}}`` placeholders.

        Unknown placeholders are left untouched.
        """

        def substitute(match: re.Match[str]) -> str:
            return variables.get(match.group(1), match.group(0))

        return [
            {"role": message.role, "content": _PLACEHOLDER.sub(substitute, message.content)}
            for message in self.messages
        ]

    def response_format(self) -> dict[str, Any]:
        """Return the ``response_format`` request field."""
        return {"type": "json_schema", "json_schema": self.json_schema}


def load_prompt(path: Path | str | None = None) -> PromptTemplate:
    """Load a prompt file.

    Args:
        path: Path to a ``.prompt.yml`` file. Defaults to the bundled
              bug report prompt.

    Returns:
        The parsed PromptTemplate.

    Raises:
        PromptError: If the file doesn't exist or is invalid.
    """
    prompt_path = Path(path) if path is not None else DEFAULT_PROMPT_PATH

    if not prompt_path.exists():
        raise PromptError(f"Prompt file not found: {prompt_path}")

    try:
        with open(prompt_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise PromptError(f"Invalid YAML in {prompt_path}: {e}") from e

    if not isinstance(data, dict):
        raise PromptError(f"Prompt must be a YAML mapping, got {type(data).__name__}")

    return PromptTemplate.from_dict(data, source=prompt_path)
