"""
PublishTestPlanStep: post the test plan on the review request.

When the plan needs no testing the "No testing needed" comment is
posted first and the pipeline then bails with the no-testing payload,
so preview wait, execution and reporting never run.
"""

from __future__ import annotations

from release_validator.core.logging import get_logger
from release_validator.pipeline.context import PipelineContext
from release_validator.pipeline.formatting import plan_comment_body
from release_validator.pipeline.schemas import PlanCommentResult, TestPlan, no_testing_bail_payload
from release_validator.pipeline.services import PipelineServices
from release_validator.pipeline.step import PipelineStep

logger = get_logger(__name__)


class PublishTestPlanStep(PipelineStep):
    """Comment the plan (or "No testing needed") on the pull request."""

    name = "github-test-plan-comment"
    description = "Publish the test plan as a pull request comment"
    input_model = TestPlan
    output_model = PlanCommentResult

    def __init__(self, services: PipelineServices) -> None:
        self.services = services

    async def execute(self, data: TestPlan, ctx: PipelineContext):
        github = self.services.github
        ref = self.services.review_request(ctx)

        await github.post_comment(ref, plan_comment_body(data.needs_testing, data.test_cases))

        if not data.needs_testing:
            logger.info("No testing needed, stopping pipeline after test plan comment")
            return self.bail(no_testing_bail_payload())

        return PlanCommentResult(
            success=True,
            needs_testing=data.needs_testing,
            test_cases=data.test_cases,
        )
