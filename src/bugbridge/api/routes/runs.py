"""Run history endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from bugbridge.api.dependencies import RunStoreDep
from bugbridge.api.models import APIResponse, RunResponse, run_to_response
from bugbridge.pipeline import RunOutcome

router = APIRouter(tags=["runs"])


@router.get("/runs", response_model=APIResponse[list[RunResponse]])
def list_runs(
    store: RunStoreDep,
    outcome: RunOutcome | None = None,
    repo: str | None = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
) -> APIResponse[list[RunResponse]]:
    """List recorded runs, newest first."""
    runs = store.list_runs(outcome=outcome, repo=repo, limit=limit)
    return APIResponse(data=[run_to_response(r) for r in runs])


@router.get("/runs/{run_id}", response_model=APIResponse[RunResponse])
def get_run(run_id: str, store: RunStoreDep) -> APIResponse[RunResponse]:
    """Get one recorded run."""
    run = store.get_run(run_id)
    return APIResponse(data=run_to_response(run))
