"""Shared constants and enums used across the application."""

from enum import StrEnum


class PipelineStatus(StrEnum):
    """Overall status of a pipeline execution."""

    COMPLETED = "COMPLETED"
    BAILED = "BAILED"


class StepStatus(StrEnum):
    """Status of an individual pipeline step."""

    COMPLETED = "COMPLETED"
    BAILED = "BAILED"
    FAILED = "FAILED"


class RemoteTaskStatus(StrEnum):
    """Statuses reported by the remote browser task service."""

    QUEUED = "queued"
    STARTED = "started"
    PAUSED = "paused"
    FINISHED = "finished"
    STOPPED = "stopped"
    FAILED = "failed"


# A task in one of these states is still running remotely.
NON_TERMINAL_TASK_STATUSES = frozenset({
    RemoteTaskStatus.QUEUED,
    RemoteTaskStatus.STARTED,
    RemoteTaskStatus.PAUSED,
})


class TaskOutcome(StrEnum):
    """Local view of how a single test case's remote task ended."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class TestCaseStatus(StrEnum):
    """Status reported for a test case in the test report."""

    SUCCESS = "success"
    FAIL = "fail"


class CommentHeading(StrEnum):
    """Markdown headings of the comments posted on the review request."""

    TEST_PLAN = "## Test Plan"
    TEST_REPORT = "## Test Report"
    NO_TESTING = "## No testing needed"


SUCCESS_GLYPH = "✅"
FAILURE_GLYPH = "❌"
