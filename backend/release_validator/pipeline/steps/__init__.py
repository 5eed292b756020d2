"""
Workflow steps, in execution order:

    generate-testplan → github-test-plan-comment → (map) →
    wait-for-preview-environment → execute-tests → github-test-report
"""

from release_validator.pipeline.steps.execute_tests import ExecuteTestsStep
from release_validator.pipeline.steps.generate_test_plan import GenerateTestPlanStep
from release_validator.pipeline.steps.publish_test_plan import PublishTestPlanStep
from release_validator.pipeline.steps.publish_test_report import PublishTestReportStep
from release_validator.pipeline.steps.wait_for_preview import WaitForPreviewStep

__all__ = [
    "ExecuteTestsStep",
    "GenerateTestPlanStep",
    "PublishTestPlanStep",
    "PublishTestReportStep",
    "WaitForPreviewStep",
]
