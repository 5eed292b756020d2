"""
WaitForPreviewStep: block until the deployment bot announces a preview.

Polls the review request comments with the bounded poller.  A failed
comment fetch is logged and retried on the next tick; running out of
time raises PollTimeoutError and aborts the pipeline.
"""

from __future__ import annotations

from release_validator.core.logging import get_logger
from release_validator.pipeline.context import PipelineContext
from release_validator.pipeline.polling import poll_until
from release_validator.pipeline.preview import find_preview_url
from release_validator.pipeline.schemas import PreviewEnvironment, PreviewWaitInput
from release_validator.pipeline.services import PipelineServices
from release_validator.pipeline.step import PipelineStep

logger = get_logger(__name__)


class WaitForPreviewStep(PipelineStep):
    """Find the preview environment URL in bot comments."""

    name = "wait-for-preview-environment"
    description = "Wait for the preview deployment to be announced"
    input_model = PreviewWaitInput
    output_model = PreviewEnvironment

    def __init__(self, services: PipelineServices) -> None:
        self.services = services

    async def execute(self, data: PreviewWaitInput, ctx: PipelineContext) -> PreviewEnvironment:
        services = self.services
        ref = services.review_request(ctx)

        logger.info(
            "Waiting for preview environment",
            comments_url=ref.comments_url,
            bot_login=services.preview_bot_login,
        )

        async def check() -> str | None:
            comments = await services.github.list_comments(ref)
            return find_preview_url(comments, services.preview_bot_login)

        preview_url = await poll_until(
            check,
            interval=services.preview_poll_interval,
            max_wait=services.preview_max_wait,
            description="Preview environment",
        )

        logger.info("Preview environment ready", preview_url=preview_url)
        return PreviewEnvironment(preview_url=preview_url, deployment_status="ready")
