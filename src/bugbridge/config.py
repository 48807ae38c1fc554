"""Configuration loading for bugbridge.

Settings come from the environment. An optional YAML file may supply the same
keys in lowercase (e.g. ``jira_base_url``); environment variables win.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_MODEL_ENDPOINT = "https://models.github.ai/inference"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_MARKER_LABEL = "bug"
DEFAULT_ISSUE_TYPE = "Bug"


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


def _missing(values: Mapping[str, str]) -> list[str]:
    return [name for name, value in values.items() if not value]


@dataclass
class JiraSettings:
    """Jira account and project settings."""

    base_url: str = ""
    email: str = ""
    api_token: str = ""
    project_key: str = ""
    issue_type: str = DEFAULT_ISSUE_TYPE

    def validate(self) -> None:
        """Raise ConfigError naming every required Jira variable that is unset."""
        missing = _missing(
            {
                "JIRA_BASE_URL": self.base_url,
                "JIRA_USER_EMAIL": self.email,
                "JIRA_PROJECT_KEY": self.project_key,
                "JIRA_API_TOKEN": self.api_token,
            }
        )
        if missing:
            raise ConfigError(f"Missing required Jira settings: {', '.join(missing)}")


@dataclass
class GitHubSettings:
    """GitHub API settings used to comment on issues."""

    token: str = ""
    api_url: str = DEFAULT_GITHUB_API_URL

    def validate(self) -> None:
        """Raise ConfigError if the GitHub token is unset."""
        if not self.token:
            raise ConfigError("Missing required GitHub settings: GITHUB_TOKEN")


@dataclass
class ModelSettings:
    """Hosted completion endpoint settings."""

    endpoint: str = DEFAULT_MODEL_ENDPOINT
    token: str = ""
    prompt_file: Path | None = None
    model: str | None = None

    def validate(self) -> None:
        """Raise ConfigError if the endpoint or its token is unset."""
        missing = _missing(
            {
                "BUGBRIDGE_MODEL_ENDPOINT": self.endpoint,
                "BUGBRIDGE_MODEL_TOKEN": self.token,
            }
        )
        if missing:
            raise ConfigError(f"Missing required model settings: {', '.join(missing)}")


@dataclass
class Settings:
    """Top-level bugbridge settings."""

    jira: JiraSettings = field(default_factory=JiraSettings)
    github: GitHubSettings = field(default_factory=GitHubSettings)
    model: ModelSettings = field(default_factory=ModelSettings)
    marker_label: str = DEFAULT_MARKER_LABEL
    webhook_secret: str | None = None

    def validate(self) -> None:
        """Validate every section, failing on the first incomplete one."""
        self.model.validate()
        self.jira.validate()
        self.github.validate()

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> Settings:
        """Build settings from a mapping of upper-case variable names.

        Args:
            values: Mapping such as ``os.environ``.

        Returns:
            Parsed settings. Required values may still be empty; call
            ``validate()`` before use.
        """

        def get(name: str, default: str = "") -> str:
            value = values.get(name)
            return str(value).strip() if value is not None else default

        github_token = get("GITHUB_TOKEN")
        prompt_file = get("BUGBRIDGE_PROMPT_FILE")

        return cls(
            jira=JiraSettings(
                base_url=get("JIRA_BASE_URL").rstrip("/"),
                email=get("JIRA_USER_EMAIL"),
                api_token=get("JIRA_API_TOKEN"),
                project_key=get("JIRA_PROJECT_KEY"),
                issue_type=get("JIRA_ISSUE_TYPE") or DEFAULT_ISSUE_TYPE,
            ),
            github=GitHubSettings(
                token=github_token,
                api_url=get("GITHUB_API_URL") or DEFAULT_GITHUB_API_URL,
            ),
            model=ModelSettings(
                endpoint=get("BUGBRIDGE_MODEL_ENDPOINT") or DEFAULT_MODEL_ENDPOINT,
                token=get("BUGBRIDGE_MODEL_TOKEN") or github_token,
                prompt_file=Path(prompt_file) if prompt_file else None,
                model=get("BUGBRIDGE_MODEL") or None,
            ),
            marker_label=get("BUGBRIDGE_MARKER_LABEL") or DEFAULT_MARKER_LABEL,
            webhook_secret=get("BUGBRIDGE_WEBHOOK_SECRET") or None,
        )


def load_settings(
    config_path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from an optional YAML file overlaid by the environment.

    Args:
        config_path: Optional path to a YAML mapping with lowercase keys.
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        Parsed settings (not yet validated).

    Raises:
        ConfigError: If the file doesn't exist or is not a YAML mapping.
    """
    values: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a YAML mapping, got {type(data).__name__}")
        values.update({str(key).upper(): value for key, value in data.items()})

    env = os.environ if environ is None else environ
    values.update({key: value for key, value in env.items() if value})

    return Settings.from_mapping(values)
