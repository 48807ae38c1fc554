"""Run Store - Persistent audit log of pipeline runs."""

from bugbridge.run_store.exceptions import RunNotFoundError, RunStoreError
from bugbridge.run_store.models import RunRecord
from bugbridge.run_store.store import RunStore

__all__ = [
    "RunNotFoundError",
    "RunRecord",
    "RunStore",
    "RunStoreError",
]
