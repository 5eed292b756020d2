"""
Pipeline endpoints: queue a validation run for a pull request.
"""

from fastapi import APIRouter, HTTPException, status

from release_validator.api.schemas.pipeline import TriggerRequest, TriggerResponse
from release_validator.clients.github import parse_review_request_url
from release_validator.core.logging import get_logger
from release_validator.pipeline.errors import InvalidReviewRequestUrl

logger = get_logger(__name__)

router = APIRouter(prefix="/pipeline", tags=["Pipeline"])


@router.post(
    "/trigger",
    response_model=TriggerResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_202_ACCEPTED,
)
async def trigger_pipeline(body: TriggerRequest) -> TriggerResponse:
    """
    Queue the review workflow for one pull request.

    The URL is checked here so malformed requests fail fast instead of
    inside the worker.  Returns immediately with the Celery task id.
    """
    from release_validator.tasks.pipeline_tasks import validate_review_request

    try:
        parse_review_request_url(body.pull_request_url)
    except InvalidReviewRequestUrl as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    task = validate_review_request.delay(pull_request_url=body.pull_request_url)
    logger.info("Validation queued", task_id=task.id, pull_request_url=body.pull_request_url)

    return TriggerResponse(
        message="Pipeline queued",
        task_id=task.id,
        pull_request_url=body.pull_request_url,
    )
