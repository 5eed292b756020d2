"""
Entry helper shared by the Celery task and the CLI script.

Builds the services from validated configuration, runs the review
workflow once and always closes the HTTP clients.
"""

from __future__ import annotations

from release_validator.core.config import Settings, settings, validate_startup
from release_validator.core.logging import get_logger
from release_validator.pipeline.engine import PipelineResult
from release_validator.pipeline.flow import build_review_pipeline
from release_validator.pipeline.schemas import ReviewRequestInput
from release_validator.pipeline.services import PipelineServices

logger = get_logger(__name__)


async def run_review_pipeline(
    pull_request_url: str,
    *,
    config: Settings | None = None,
    services: PipelineServices | None = None,
    execution_id: str | None = None,
) -> PipelineResult:
    """
    Validate one pull request end to end.

    Raises StartupError when credentials are missing and re-raises any
    pipeline failure after closing the clients.
    """
    owns_services = services is None
    if services is None:
        config = config or settings
        services = PipelineServices.from_settings(config, validate_startup(config))

    try:
        engine = build_review_pipeline(services)
        return await engine.run(
            ReviewRequestInput(pull_request_url=pull_request_url),
            execution_id=execution_id,
        )
    finally:
        if owns_services:
            await services.aclose()
