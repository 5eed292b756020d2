"""
ConcurrentTaskExecutor: runs every test case as a remote browser task.

All task lifecycles run concurrently.  Each one creates its remote task,
then polls it until the status leaves {queued, started, paused} or its
own max_wait expires.  Results land in index-addressed slots, so the
output order always equals the input order whatever the completion
order.  A failure in one task becomes a ``fail`` result for that test
case only; nothing is raised to sibling tasks or to the caller.

Local timeouts abandon the remote task: no cancel request is sent and
the task may keep running on the service after it was reported failed.
"""

from __future__ import annotations

import asyncio
import time
from typing import Protocol, Sequence

from release_validator.core.constants import TaskOutcome, TestCaseStatus
from release_validator.core.logging import get_logger
from release_validator.pipeline.errors import PollTimeoutError
from release_validator.pipeline.polling import poll_until
from release_validator.pipeline.schemas import TestCase, TestCaseResult

logger = get_logger(__name__)


class CreatedTaskLike(Protocol):
    id: str


class RemoteTaskLike(Protocol):
    status: str
    is_success: bool | None

    @property
    def is_terminal(self) -> bool: ...


class TaskClient(Protocol):
    async def create_task(self, description: str) -> CreatedTaskLike: ...

    async def get_task(self, task_id: str) -> RemoteTaskLike: ...


OUTCOME_STATUS = {
    TaskOutcome.SUCCEEDED: TestCaseStatus.SUCCESS,
    TaskOutcome.FAILED: TestCaseStatus.FAIL,
    TaskOutcome.TIMED_OUT: TestCaseStatus.FAIL,
}


def describe_test_case(preview_url: str, test_case: TestCase) -> str:
    """Natural-language instruction sent to the browser automation service."""
    return (
        f"Navigate to {preview_url} and execute this test case: "
        f"{test_case.title}. {test_case.description}"
    )


class ConcurrentTaskExecutor:
    """Fans out one remote task per test case and joins all outcomes."""

    def __init__(
        self,
        client: TaskClient,
        *,
        poll_interval: float,
        max_wait: float,
        sleep=asyncio.sleep,
        clock=time.monotonic,
    ) -> None:
        self.client = client
        self.poll_interval = poll_interval
        self.max_wait = max_wait
        self._sleep = sleep
        self._clock = clock

    async def run(
        self,
        test_cases: Sequence[TestCase],
        preview_url: str,
    ) -> list[TestCaseResult]:
        """Execute every test case concurrently; results follow input order."""
        slots: list[TestCaseResult | None] = [None] * len(test_cases)

        async def run_slot(index: int, test_case: TestCase) -> None:
            outcome = await self.run_one(test_case, preview_url)
            slots[index] = TestCaseResult(title=test_case.title, status=OUTCOME_STATUS[outcome])

        logger.info("Executing test cases", count=len(test_cases), preview_url=preview_url)
        await asyncio.gather(*(run_slot(i, tc) for i, tc in enumerate(test_cases)))

        # every slot is filled: run_one never raises
        results: list[TestCaseResult] = slots
        logger.info(
            "Test execution finished",
            passed=sum(1 for r in results if r.status == TestCaseStatus.SUCCESS),
            failed=sum(1 for r in results if r.status == TestCaseStatus.FAIL),
        )
        return results

    async def run_one(self, test_case: TestCase, preview_url: str) -> TaskOutcome:
        """Drive one test case's remote task to a terminal outcome.  Never raises."""
        log = logger.bind(test_case=test_case.title)
        task_id: str | None = None

        try:
            created = await self.client.create_task(describe_test_case(preview_url, test_case))
            task_id = created.id
            log = log.bind(task_id=task_id)
            log.info("Remote task created")

            async def check():
                task = await self.client.get_task(task_id)
                return task if task.is_terminal else None

            task = await poll_until(
                check,
                interval=self.poll_interval,
                max_wait=self.max_wait,
                description=f"Task {task_id}",
                tolerate_errors=False,
                sleep=self._sleep,
                clock=self._clock,
            )
        except PollTimeoutError as exc:
            # remote task is left running
            log.warning("Abandoning remote task after local timeout", error=str(exc))
            return TaskOutcome.TIMED_OUT
        except Exception as exc:
            log.error("Test case failed", error=str(exc), error_type=type(exc).__name__)
            return TaskOutcome.FAILED

        if task.is_success is True:
            log.info("Test case passed", remote_status=task.status)
            return TaskOutcome.SUCCEEDED

        log.info("Test case did not pass", remote_status=task.status, is_success=task.is_success)
        return TaskOutcome.FAILED
