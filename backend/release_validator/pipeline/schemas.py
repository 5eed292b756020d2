"""
Data contracts exchanged between pipeline steps.

Field names are snake_case in Python and camelCase on the wire
(``needsTesting``, ``testCases``, ``previewUrl``...).
"""

from __future__ import annotations

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic.alias_generators import to_camel

from release_validator.core.constants import TestCaseStatus

_url_adapter = TypeAdapter(AnyHttpUrl)


class ContractModel(BaseModel):
    """Base for every step contract: camelCase aliases, population by name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        """Wire representation, camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class ReviewRequestInput(ContractModel):
    pull_request_url: str


class TestCase(ContractModel):
    title: str
    description: str


class TestPlan(ContractModel):
    """
    Structured test plan for one review request.

    A plan that does not need testing never carries test cases; any the
    generator produced anyway are dropped.
    """

    needs_testing: bool
    test_cases: list[TestCase] = Field(default_factory=list)

    @model_validator(mode="after")
    def _drop_cases_when_not_needed(self) -> "TestPlan":
        if not self.needs_testing and self.test_cases:
            self.test_cases = []
        return self


class PlanCommentResult(ContractModel):
    success: bool
    needs_testing: bool
    test_cases: list[TestCase] = Field(default_factory=list)


class PreviewWaitInput(ContractModel):
    success: bool


class PreviewEnvironment(ContractModel):
    preview_url: str
    deployment_status: str

    @field_validator("preview_url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        _url_adapter.validate_python(value)
        return value


class TestCaseResult(ContractModel):
    title: str
    status: TestCaseStatus


class TestExecutionResult(ContractModel):
    needs_testing: bool
    test_cases: list[TestCaseResult] = Field(default_factory=list)


class ReportResult(ContractModel):
    success: bool


def no_testing_bail_payload() -> PlanCommentResult:
    """Final pipeline result when the plan says nothing needs testing."""
    return PlanCommentResult(success=True, needs_testing=False, test_cases=[])
