"""Exceptions for the Pipeline module."""


class PipelineError(Exception):
    """Unexpected error while running a pipeline step."""

    pass
