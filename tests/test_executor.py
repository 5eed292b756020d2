"""Tests for the ConcurrentTaskExecutor."""

from __future__ import annotations

import asyncio

import pytest

from release_validator.core.constants import TaskOutcome
from release_validator.core.constants import TestCaseStatus as Status
from release_validator.pipeline import schemas
from release_validator.pipeline.errors import TaskError
from release_validator.pipeline.executor import ConcurrentTaskExecutor, describe_test_case

from fakes import FakeClock, FakeTask, ScriptedTaskClient

PREVIEW = "https://shop-git-feature.vercel.app"

DONE_OK = ("finished", True)
DONE_BAD = ("finished", False)
RUNNING = ("started", None)


def cases(*titles: str) -> list[schemas.TestCase]:
    return [schemas.TestCase(title=t, description=f"Check {t.lower()}") for t in titles]


def fake_time_executor(client) -> ConcurrentTaskExecutor:
    clock = FakeClock()
    return ConcurrentTaskExecutor(
        client, poll_interval=2, max_wait=300, sleep=clock.sleep, clock=clock,
    )


class DelayedTaskClient:
    """Finishes each task after a per-title number of event loop turns."""

    def __init__(self, turns: dict[str, int]) -> None:
        self.turns = turns
        self.finished: list[str] = []
        self._titles: dict[str, str] = {}

    async def create_task(self, description):
        title = next(t for t in self.turns if f"test case: {t}." in description)
        task_id = f"id-{title}"
        self._titles[task_id] = title
        return FakeTask(id=task_id, status="queued")

    async def get_task(self, task_id):
        title = self._titles[task_id]
        for _ in range(self.turns[title]):
            await asyncio.sleep(0)
        self.finished.append(title)
        return FakeTask(id=task_id, status="finished", is_success=True)


class TestOrdering:

    @pytest.mark.asyncio
    async def test_output_order_matches_input_not_completion(self):
        client = DelayedTaskClient({"Slow": 50, "Medium": 10, "Fast": 0})
        executor = ConcurrentTaskExecutor(client, poll_interval=0.01, max_wait=5)

        results = await executor.run(cases("Slow", "Medium", "Fast"), PREVIEW)

        assert client.finished == ["Fast", "Medium", "Slow"]
        assert [r.title for r in results] == ["Slow", "Medium", "Fast"]
        assert all(r.status == Status.SUCCESS for r in results)

    @pytest.mark.asyncio
    async def test_empty_input_gives_empty_output(self):
        executor = fake_time_executor(ScriptedTaskClient({}))

        assert await executor.run([], PREVIEW) == []

    @pytest.mark.asyncio
    async def test_tasks_run_concurrently(self):
        started: list[str] = []
        release = asyncio.Event()

        class GatedClient(DelayedTaskClient):
            async def get_task(self, task_id):
                started.append(task_id)
                if len(started) == 3:
                    release.set()
                await release.wait()
                return FakeTask(id=task_id, status="finished", is_success=True)

        executor = ConcurrentTaskExecutor(
            GatedClient({"A": 0, "B": 0, "C": 0}), poll_interval=0.01, max_wait=5,
        )

        # would deadlock if the tasks ran one after another
        results = await asyncio.wait_for(executor.run(cases("A", "B", "C"), PREVIEW), timeout=2)

        assert len(results) == 3

    @pytest.mark.asyncio
    async def test_one_result_per_case_with_mixed_outcomes(self):
        titles = [f"Case {i}" for i in range(12)]
        behaviours = [[DONE_OK], [DONE_BAD], [RUNNING], RuntimeError("rejected")]
        client = ScriptedTaskClient({t: behaviours[i % 4] for i, t in enumerate(titles)})
        executor = fake_time_executor(client)

        results = await executor.run(cases(*titles), PREVIEW)

        assert [r.title for r in results] == titles
        assert [r.status for r in results] == [Status.SUCCESS, Status.FAIL, Status.FAIL, Status.FAIL] * 3


class TestIsolation:

    @pytest.mark.asyncio
    async def test_polls_through_non_terminal_states(self):
        client = ScriptedTaskClient({"Login": [("queued", None), RUNNING, ("paused", None), RUNNING, DONE_OK]})
        executor = fake_time_executor(client)

        results = await executor.run(cases("Login"), PREVIEW)

        assert results == [schemas.TestCaseResult(title="Login", status=Status.SUCCESS)]

    @pytest.mark.asyncio
    async def test_unsuccessful_terminal_state_fails_only_that_case(self):
        client = ScriptedTaskClient({
            "Add item": [RUNNING, DONE_OK],
            "Remove item": [DONE_BAD],
            "Checkout": [("stopped", None)],
        })
        executor = fake_time_executor(client)

        results = await executor.run(cases("Add item", "Remove item", "Checkout"), PREVIEW)

        assert [r.status for r in results] == [Status.SUCCESS, Status.FAIL, Status.FAIL]

    @pytest.mark.asyncio
    async def test_create_error_fails_only_that_case(self):
        client = ScriptedTaskClient({
            "Add item": [DONE_OK],
            "Remove item": RuntimeError("service unavailable"),
        })
        executor = fake_time_executor(client)

        results = await executor.run(cases("Add item", "Remove item"), PREVIEW)

        assert [(r.title, r.status) for r in results] == [
            ("Add item", Status.SUCCESS),
            ("Remove item", Status.FAIL),
        ]

    @pytest.mark.asyncio
    async def test_status_error_fails_immediately(self):
        client = ScriptedTaskClient({
            "Search": [RUNNING, (TaskError("malformed response"), None)],
        })
        clock = FakeClock()
        executor = ConcurrentTaskExecutor(
            client, poll_interval=2, max_wait=300, sleep=clock.sleep, clock=clock,
        )

        outcome = await executor.run_one(cases("Search")[0], PREVIEW)

        assert outcome == TaskOutcome.FAILED
        assert clock.now == 2

    @pytest.mark.asyncio
    async def test_timeout_is_local_and_reported_as_fail(self):
        client = ScriptedTaskClient({"Add item": [DONE_OK], "Remove item": [RUNNING]})
        clock = FakeClock()
        executor = ConcurrentTaskExecutor(
            client, poll_interval=2, max_wait=300, sleep=clock.sleep, clock=clock,
        )

        outcome = await executor.run_one(cases("Remove item")[0], PREVIEW)
        assert outcome == TaskOutcome.TIMED_OUT
        assert clock.now == 300

        results = await executor.run(cases("Add item", "Remove item"), PREVIEW)
        assert [r.status for r in results] == [Status.SUCCESS, Status.FAIL]


def test_task_description_names_target_and_case():
    case = schemas.TestCase(title="Add item", description="Add Apple to the basket.")

    assert describe_test_case(PREVIEW, case) == (
        "Navigate to https://shop-git-feature.vercel.app and execute this test case: "
        "Add item. Add Apple to the basket."
    )
