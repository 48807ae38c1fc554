"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import TYPE_CHECKING, Annotated, Protocol

from fastapi import Depends

from bugbridge.run_store import RunStore

if TYPE_CHECKING:
    from bugbridge.events import IssueEvent
    from bugbridge.pipeline import RunResult


class PipelineRunner(Protocol):
    """Interface for the Pipeline component."""

    def run(self, event: IssueEvent) -> RunResult:
        """Run the pipeline for one event."""
        ...

    def close(self) -> None:
        """Release client connections."""
        ...


# Global RunStore instance (initialized on app startup)
_run_store: RunStore | None = None


def init_run_store(db_path: str = "bugbridge.db") -> RunStore:
    """Initialize the global RunStore instance."""
    global _run_store  # noqa: PLW0603
    _run_store = RunStore(db_path)
    return _run_store


def close_run_store() -> None:
    """Close the global RunStore instance."""
    global _run_store  # noqa: PLW0603
    if _run_store is not None:
        _run_store.close()
        _run_store = None


def get_run_store() -> Generator[RunStore, None, None]:
    """Dependency that provides the RunStore instance."""
    if _run_store is None:
        raise RuntimeError("RunStore not initialized. Call init_run_store() first.")
    yield _run_store


# Type alias for dependency injection
RunStoreDep = Annotated[RunStore, Depends(get_run_store)]

# Global Pipeline instance (initialized on app startup)
_pipeline: PipelineRunner | None = None


def init_pipeline(pipeline: PipelineRunner) -> None:
    """Initialize the global Pipeline instance."""
    global _pipeline  # noqa: PLW0603
    _pipeline = pipeline


def close_pipeline() -> None:
    """Close the global Pipeline instance."""
    global _pipeline  # noqa: PLW0603
    if _pipeline is not None:
        _pipeline.close()
        _pipeline = None


def get_pipeline() -> Generator[PipelineRunner, None, None]:
    """Dependency that provides the Pipeline instance."""
    if _pipeline is None:
        raise RuntimeError("Pipeline not initialized. Call init_pipeline() first.")
    yield _pipeline


# Type alias for dependency injection
PipelineDep = Annotated[PipelineRunner, Depends(get_pipeline)]

# Webhook secret (None disables signature checks)
_webhook_secret: str | None = None


def init_webhook_secret(secret: str | None) -> None:
    """Set the shared secret used to verify webhook deliveries."""
    global _webhook_secret  # noqa: PLW0603
    _webhook_secret = secret or None


def get_webhook_secret() -> str | None:
    """Dependency that provides the webhook secret."""
    return _webhook_secret


WebhookSecretDep = Annotated[str | None, Depends(get_webhook_secret)]
