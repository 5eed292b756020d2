"""
Comment bodies posted on the review request.

The exact text is consumed by other tooling; keep it byte-for-byte stable.
"""

from __future__ import annotations

from typing import Sequence

from release_validator.core.constants import (
    FAILURE_GLYPH,
    SUCCESS_GLYPH,
    CommentHeading,
    TestCaseStatus,
)
from release_validator.pipeline.schemas import TestCase, TestCaseResult

NO_TESTING_COMMENT = CommentHeading.NO_TESTING.value


def format_test_cases(test_cases: Sequence[TestCase]) -> str:
    return "\n\n".join(f"### {tc.title}\n{tc.description}" for tc in test_cases)


def format_test_report(results: Sequence[TestCaseResult]) -> str:
    lines = []
    for result in results:
        glyph = SUCCESS_GLYPH if result.status == TestCaseStatus.SUCCESS else FAILURE_GLYPH
        lines.append(f"{glyph} **{result.title}**")
    return "\n".join(lines)


def plan_comment_body(needs_testing: bool, test_cases: Sequence[TestCase]) -> str:
    if not needs_testing:
        return NO_TESTING_COMMENT
    return f"{CommentHeading.TEST_PLAN}\n\n{format_test_cases(test_cases)}"


def report_comment_body(needs_testing: bool, results: Sequence[TestCaseResult]) -> str:
    if not needs_testing:
        return NO_TESTING_COMMENT
    return f"{CommentHeading.TEST_REPORT}\n\n{format_test_report(results)}"
