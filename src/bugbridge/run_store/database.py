"""SQLite engine and session handling for the Run Store."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bugbridge.run_store.exceptions import RunStoreError
from bugbridge.run_store.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Engine

MEMORY_PATH = ":memory:"


def _enable_wal(dbapi_connection: object, _connection_record: object) -> None:
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class Database:
    """Owns the engine for one run history database.

    File databases use WAL so the webhook handler can write while the
    history endpoints read. ``:memory:`` shares a single connection.
    """

    def __init__(self, db_path: str = "bugbridge.db") -> None:
        self.db_path = db_path
        self._engine: Engine | None = None
        self._sessions: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine:
        """Create the engine on first use."""
        if self._engine is None:
            if self.db_path == MEMORY_PATH:
                # Handlers run in a threadpool, so the one connection crosses threads
                self._engine = create_engine(
                    "sqlite://",
                    poolclass=StaticPool,
                    connect_args={"check_same_thread": False},
                )
            else:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                self._engine = create_engine(
                    f"sqlite:///{self.db_path}",
                    connect_args={"check_same_thread": False},
                )
                event.listen(self._engine, "connect", _enable_wal)
        return self._engine

    def create_tables(self) -> None:
        """Create the runs table if it doesn't exist."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise RunStoreError(f"Could not initialize run database {self.db_path}: {e}") from e

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session, committing on success and rolling back on error.

        Raises:
            RunStoreError: If the database operation fails.
        """
        if self._sessions is None:
            self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)

        session = self._sessions()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise RunStoreError(f"Run database error: {e}") from e
        finally:
            session.close()

    def close(self) -> None:
        """Dispose of the engine and its connections."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._sessions = None
