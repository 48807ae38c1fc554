"""Pipeline package - Sequential issue-to-ticket sync."""

from bugbridge.pipeline.exceptions import PipelineError
from bugbridge.pipeline.models import RunOutcome, RunResult, Step, StepRecord, StepStatus
from bugbridge.pipeline.pipeline import Extractor, Notifier, Pipeline, Publisher

__all__ = [
    "Extractor",
    "Notifier",
    "Pipeline",
    "PipelineError",
    "Publisher",
    "RunOutcome",
    "RunResult",
    "Step",
    "StepRecord",
    "StepStatus",
]
