"""CLI entry point for bugbridge.

``bugbridge run`` is meant for CI hosts that hand the triggering webhook
payload over as a file (e.g. ``GITHUB_EVENT_PATH`` in GitHub Actions).
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from bugbridge import __version__
from bugbridge.config import ConfigError, load_settings
from bugbridge.events import EventPayloadError, IssueEvent
from bugbridge.extraction import PromptError
from bugbridge.logging import setup_logging
from bugbridge.normalizer import normalize_body
from bugbridge.pipeline import Pipeline, PipelineError, RunOutcome, RunResult


def _load_event(event_path: Path) -> IssueEvent:
    try:
        with open(event_path, encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise EventPayloadError(f"Invalid JSON in {event_path}: {e}") from e
    return IssueEvent.from_payload(payload)


def _echo_result(result: RunResult) -> None:
    event = result.event
    click.echo(f"Issue: {event.repo}#{event.number} {event.title}")
    for record in result.steps:
        line = f"  {record.step.value:<10} {record.status.value}"
        if record.detail:
            line += f" ({record.detail})"
        click.echo(line)
    if result.ticket is not None:
        click.echo(f"Ticket: {result.ticket.key} {result.ticket.browse_url}")
    click.echo(f"Outcome: {result.outcome.value}")


@click.group()
@click.version_option(__version__)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for log files (default: BUGBRIDGE_LOG_DIR or ./logs)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, log_dir: Path | None, verbose: bool) -> None:
    """bugbridge - turn labelled GitHub bug reports into Jira tickets."""
    ctx.ensure_object(dict)
    ctx.obj["log_dir"] = log_dir
    ctx.obj["level"] = "DEBUG" if verbose else None


@main.command()
@click.option(
    "--event-path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="GITHUB_EVENT_PATH",
    required=True,
    help="Path to the webhook payload JSON (default: GITHUB_EVENT_PATH)",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Optional YAML settings file (environment variables take precedence)",
)
@click.option("--marker-label", default=None, help="Label that gates processing")
@click.pass_context
def run(
    ctx: click.Context,
    event_path: Path,
    config_path: Path | None,
    marker_label: str | None,
) -> None:
    """Run the pipeline once for a webhook payload file.

    Exits 0 when the run completes or is skipped, 1 when it fails.
    """
    setup_logging(log_dir=ctx.obj["log_dir"], level=ctx.obj["level"])

    try:
        event = _load_event(event_path)
        settings = load_settings(config_path)
        if marker_label:
            settings.marker_label = marker_label
        pipeline = Pipeline.from_settings(settings)
    except (ConfigError, EventPayloadError, PromptError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    try:
        result = pipeline.run(event)
    except PipelineError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        pipeline.close()

    _echo_result(result)
    if result.outcome == RunOutcome.FAILED:
        click.echo(f"Run failed at {result.failed_step}: {result.error}", err=True)
        sys.exit(1)


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", default=8000, show_default=True, type=int, help="Bind port")
@click.option("--db-path", default="bugbridge.db", show_default=True, help="Run history database")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, db_path: str) -> None:
    """Serve the webhook receiver and run history API."""
    import uvicorn  # noqa: PLC0415

    from bugbridge.api.app import create_app  # noqa: PLC0415

    setup_logging(log_dir=ctx.obj["log_dir"], level=ctx.obj["level"])

    # Build eagerly so missing settings fail before the server binds
    try:
        settings = load_settings()
        pipeline = Pipeline.from_settings(settings)
    except (ConfigError, PromptError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    app = create_app(db_path=db_path, settings=settings, pipeline=pipeline)
    uvicorn.run(app, host=host, port=port, log_config=None)


@main.command()
def normalize() -> None:
    """Print stdin collapsed to a single line."""
    click.echo(normalize_body(sys.stdin.read()))


if __name__ == "__main__":
    main()
