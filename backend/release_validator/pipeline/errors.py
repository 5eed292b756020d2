"""
Domain-specific exception hierarchy for the pipeline engine.

All pipeline exceptions inherit from PipelineError so callers can
catch broadly or narrowly as needed.  Each exception carries structured
context (step name, execution ID, etc.) for logging/debugging.

Only per-test-case errors (TaskError, PollTimeoutError raised inside the
task executor) are absorbed locally; everything else propagates to the
pipeline caller.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        execution_id: str | None = None,
        step_name: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.execution_id = execution_id
        self.step_name = step_name
        self.details = details or {}
        super().__init__(message)


class PipelineConfigError(PipelineError):
    """The step list handed to the engine is malformed."""
    pass


class StepValidationError(PipelineError):
    """A step's input or output does not satisfy its declared contract."""
    pass


class UpstreamApiError(PipelineError):
    """A non-2xx response from the review host or the issue tracker."""

    def __init__(
        self,
        operation: str,
        status: int,
        *,
        url: str | None = None,
        response_body: str | None = None,
        **kwargs,
    ) -> None:
        self.operation = operation
        self.status = status
        self.url = url
        self.response_body = response_body
        message = f"Failed to {operation} ({status})"
        if url:
            message = f"{message} on {url}"
        if response_body:
            message = f"{message}: {response_body}"
        super().__init__(message, **kwargs)


class PollTimeoutError(PipelineError, TimeoutError):
    """A bounded poll exceeded its maximum wait."""

    def __init__(
        self,
        description: str,
        *,
        max_wait: float,
        elapsed: float,
        **kwargs,
    ) -> None:
        self.description = description
        self.max_wait = max_wait
        self.elapsed = elapsed
        super().__init__(
            f"{description} not ready within {max_wait:g} seconds",
            **kwargs,
        )


class TaskError(PipelineError):
    """A remote browser task returned an unusable response."""

    def __init__(self, message: str, *, task_id: str | None = None, **kwargs) -> None:
        self.task_id = task_id
        super().__init__(message, **kwargs)


class TestPlanGenerationError(PipelineError):
    """The test plan generator produced no usable plan."""
    pass


class InvalidReviewRequestUrl(PipelineError):
    """The initiation URL does not point at a pull request or issue."""
    pass


class IssueLookupError(PipelineError):
    """The issue tracker was unreachable or answered with an unusable body."""

    def __init__(self, message: str, *, issue_id: str | None = None, **kwargs) -> None:
        self.issue_id = issue_id
        super().__init__(message, **kwargs)
