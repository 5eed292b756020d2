"""
GenerateTestPlanStep: turn the review request into a structured test plan.

Delegates to the configured TestPlanGenerator; the step itself only
owns the input/output contract.
"""

from __future__ import annotations

from release_validator.core.logging import get_logger
from release_validator.pipeline.context import PipelineContext
from release_validator.pipeline.schemas import ReviewRequestInput, TestPlan
from release_validator.pipeline.services import PipelineServices
from release_validator.pipeline.step import PipelineStep

logger = get_logger(__name__)


class GenerateTestPlanStep(PipelineStep):
    """Ask the generator for a test plan."""

    name = "generate-testplan"
    description = "Generate a test plan for the review request"
    input_model = ReviewRequestInput
    output_model = TestPlan

    def __init__(self, services: PipelineServices) -> None:
        self.services = services

    async def execute(self, data: ReviewRequestInput, ctx: PipelineContext) -> TestPlan:
        logger.info("Generating test plan", pull_request_url=data.pull_request_url)
        return await self.services.generator.generate(data.pull_request_url)
