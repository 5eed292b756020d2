"""Shared fixtures for the release validator tests."""

from __future__ import annotations

from typing import Any

import pytest

from release_validator.pipeline import schemas
from release_validator.pipeline.executor import ConcurrentTaskExecutor
from release_validator.pipeline.services import PipelineServices

from fakes import FakeGitHub, ScriptedTaskClient, StaticGenerator


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def make_services(fake_github):
    """Build PipelineServices around fakes with short real-time waits."""

    def _make(
        plan: schemas.TestPlan,
        task_script: dict[str, Any] | None = None,
        *,
        preview_max_wait: float = 0.2,
        task_max_wait: float = 0.05,
    ) -> PipelineServices:
        executor = ConcurrentTaskExecutor(
            ScriptedTaskClient(task_script or {}),
            poll_interval=0.01,
            max_wait=task_max_wait,
        )
        return PipelineServices(
            github=fake_github.client(),
            generator=StaticGenerator(plan),
            executor=executor,
            preview_bot_login="vercel[bot]",
            preview_poll_interval=0.01,
            preview_max_wait=preview_max_wait,
        )

    return _make
