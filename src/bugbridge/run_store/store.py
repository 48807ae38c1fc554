"""RunStore - Audit log of pipeline runs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from bugbridge.run_store.database import Database
from bugbridge.run_store.exceptions import RunNotFoundError
from bugbridge.run_store.models import RunRecord

if TYPE_CHECKING:
    from bugbridge.pipeline import RunOutcome, RunResult


class RunStore:
    """Persists one RunRecord per pipeline run.

    The pipeline never reads from the store; it only answers operators
    asking which runs failed and need a manual re-trigger.
    """

    def __init__(self, db_path: str = "bugbridge.db") -> None:
        """Initialize Run Store with SQLite database.

        Creates database and tables if they don't exist.

        Args:
            db_path: Path to SQLite database file
        """
        self._db = Database(db_path)
        self._db.create_tables()

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    def record_run(self, result: RunResult) -> RunRecord:
        """Save the outcome of a run.

        Args:
            result: The finished run

        Returns:
            The stored RunRecord
        """
        event = result.event
        record = RunRecord(
            repo=event.repo,
            issue_number=event.number,
            issue_title=event.title,
            issue_url=event.url,
            outcome=result.outcome.value,
            failed_step=result.failed_step.value if result.failed_step else None,
            error=result.error,
            skip_reason=result.skip_reason,
            priority=result.extraction.priority.value if result.extraction else None,
            ticket_key=result.ticket.key if result.ticket else None,
            ticket_url=result.ticket.browse_url if result.ticket else None,
            comment_url=result.comment.url if result.comment else None,
        )

        with self._db.session() as session:
            session.add(record)
            session.flush()
            session.refresh(record)
        return record

    def get_run(self, run_id: str) -> RunRecord:
        """Get a run by ID.

        Raises:
            RunNotFoundError: If the run doesn't exist
        """
        with self._db.session() as session:
            record = session.get(RunRecord, run_id)
        if record is None:
            raise RunNotFoundError(f"Run with id '{run_id}' not found")
        return record

    def list_runs(
        self,
        outcome: RunOutcome | str | None = None,
        repo: str | None = None,
        limit: int = 50,
    ) -> list[RunRecord]:
        """List runs, newest first.

        Args:
            outcome: Only return runs with this outcome
            repo: Only return runs for this repo
            limit: Maximum number of runs to return

        Returns:
            Matching runs ordered by creation time, newest first
        """
        stmt = select(RunRecord)
        if outcome is not None:
            stmt = stmt.where(RunRecord.outcome == str(outcome))
        if repo is not None:
            stmt = stmt.where(RunRecord.repo == repo)
        stmt = stmt.order_by(RunRecord.created_at.desc(), RunRecord.id).limit(limit)

        with self._db.session() as session:
            return list(session.execute(stmt).scalars().all())
