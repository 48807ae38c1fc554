"""GitHub webhook endpoint."""

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Header, Request, Response, status
from starlette.concurrency import run_in_threadpool

from bugbridge.api.dependencies import PipelineDep, RunStoreDep, WebhookSecretDep
from bugbridge.api.models import (
    APIResponse,
    WebhookResponse,
    run_result_to_response,
)
from bugbridge.api.signature import verify_signature
from bugbridge.events import EventPayloadError, IssueEvent
from bugbridge.pipeline import RunOutcome

logger = logging.getLogger("bugbridge.api.webhooks")

ISSUES_EVENT = "issues"

router = APIRouter(tags=["webhooks"])


@router.post("/webhooks/github", response_model=APIResponse[WebhookResponse])
async def github_webhook(
    request: Request,
    response: Response,
    store: RunStoreDep,
    pipeline: PipelineDep,
    secret: WebhookSecretDep,
    x_github_event: Annotated[str | None, Header()] = None,
    x_hub_signature_256: Annotated[str | None, Header()] = None,
) -> APIResponse[WebhookResponse]:
    """Run the pipeline for a GitHub "issues" delivery.

    Failed runs answer 502 so the delivery shows as failed in GitHub and can
    be redelivered by hand.
    """
    payload = await request.body()

    if secret:
        verify_signature(secret, payload, x_hub_signature_256)

    if x_github_event != ISSUES_EVENT:
        logger.info("Ignoring %r delivery", x_github_event)
        return APIResponse(
            data=WebhookResponse(
                outcome=RunOutcome.SKIPPED.value,
                skip_reason=f"ignored event {x_github_event!r}",
            )
        )

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise EventPayloadError(f"Payload is not valid JSON: {e}") from e
    event = IssueEvent.from_payload(data)

    result = await run_in_threadpool(pipeline.run, event)
    run = await run_in_threadpool(store.record_run, result)

    if result.outcome == RunOutcome.FAILED:
        response.status_code = status.HTTP_502_BAD_GATEWAY
        return APIResponse(data=run_result_to_response(result, run.id), error=result.error)

    return APIResponse(data=run_result_to_response(result, run.id))
