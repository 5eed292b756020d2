"""
Review request workflow: the ordered stage list and its engine.

Flow:
    Generate plan → Publish plan (bails when no testing is needed) →
    map to {success} → Wait for preview → Execute tests → Publish report
"""

from __future__ import annotations

from typing import Any

from release_validator.pipeline.context import PipelineContext
from release_validator.pipeline.engine import PipelineEngine
from release_validator.pipeline.schemas import PlanCommentResult, PreviewWaitInput
from release_validator.pipeline.services import PipelineServices
from release_validator.pipeline.step import MapStage, Stage
from release_validator.pipeline.steps import (
    ExecuteTestsStep,
    GenerateTestPlanStep,
    PublishTestPlanStep,
    PublishTestReportStep,
    WaitForPreviewStep,
)

PIPELINE_NAME = "pr-workflow"


def plan_comment_status(data: PlanCommentResult, ctx: PipelineContext) -> dict[str, Any]:
    """Keep only the success flag; the plan itself stays in the context."""
    return PreviewWaitInput(success=data.success).model_dump(by_alias=True)


def review_stages(services: PipelineServices) -> list[Stage]:
    return [
        GenerateTestPlanStep(services),
        PublishTestPlanStep(services),
        MapStage("plan-comment-status", plan_comment_status, "Reduce plan comment result to status"),
        WaitForPreviewStep(services),
        ExecuteTestsStep(services),
        PublishTestReportStep(services),
    ]


def build_review_pipeline(services: PipelineServices) -> PipelineEngine:
    return PipelineEngine(review_stages(services), name=PIPELINE_NAME)
