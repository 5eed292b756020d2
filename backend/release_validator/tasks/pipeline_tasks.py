"""
Celery tasks: review request validation.

Wires the review workflow into the Celery task system.  Each task
validates one pull request end to end.
"""

import asyncio

import structlog

from release_validator.pipeline.engine import PipelineResult
from release_validator.pipeline.runner import run_review_pipeline
from release_validator.tasks import celery_app

logger = structlog.get_logger("tasks.pipeline")


@celery_app.task(bind=True, name="release_validator.tasks.pipeline_tasks.validate_review_request")
def validate_review_request(self, pull_request_url: str) -> dict:
    """
    Run the review workflow for one pull request.

    The Celery task id doubles as the pipeline execution id so logs from
    both layers can be joined.
    """
    task_log = logger.bind(task_id=self.request.id, pull_request_url=pull_request_url)
    task_log.info("Validation task started")

    try:
        # Run the async pipeline engine in sync Celery context
        result: PipelineResult = asyncio.run(
            run_review_pipeline(pull_request_url, execution_id=self.request.id)
        )
    except Exception as exc:
        task_log.exception("Validation task failed", error=str(exc))
        raise

    task_log.info(
        "Validation task finished",
        pipeline_status=result.status,
        steps_completed=result.steps_completed,
        total_steps=result.total_steps,
        duration_ms=result.total_duration_ms,
    )

    return {
        "execution_id": result.execution_id,
        "status": result.status,
        "bailed_at": result.bailed_at,
        "steps_completed": result.steps_completed,
        "total_steps": result.total_steps,
        "duration_ms": result.total_duration_ms,
        "output": result.output_payload(),
    }
