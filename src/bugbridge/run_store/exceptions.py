"""Custom exceptions for the Run Store."""


class RunStoreError(Exception):
    """Base exception for Run Store errors."""


class RunNotFoundError(RunStoreError):
    """Run with given ID does not exist."""
