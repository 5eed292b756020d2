"""PublishTestReportStep: post the per-test-case results on the review request."""

from __future__ import annotations

from release_validator.core.logging import get_logger
from release_validator.pipeline.context import PipelineContext
from release_validator.pipeline.formatting import report_comment_body
from release_validator.pipeline.schemas import ReportResult, TestExecutionResult
from release_validator.pipeline.services import PipelineServices
from release_validator.pipeline.step import PipelineStep

logger = get_logger(__name__)


class PublishTestReportStep(PipelineStep):
    name = "github-test-report"
    description = "Publish the test report as a pull request comment"
    input_model = TestExecutionResult
    output_model = ReportResult

    def __init__(self, services: PipelineServices) -> None:
        self.services = services

    async def execute(self, data: TestExecutionResult, ctx: PipelineContext) -> ReportResult:
        github = self.services.github
        ref = self.services.review_request(ctx)

        await github.post_comment(ref, report_comment_body(data.needs_testing, data.test_cases))
        logger.info("Test report published", results=len(data.test_cases))
        return ReportResult(success=True)
