"""
PipelineServices: dependency container handed to every step.

Steps never read credentials or build clients themselves; the entry
point builds one container from validated startup configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from release_validator.clients.browser_tasks import BrowserTaskClient
from release_validator.clients.github import GitHubClient, ReviewRequestRef
from release_validator.clients.issue_tracker import IssueTrackerClient
from release_validator.core.config import Credentials, Settings
from release_validator.pipeline.context import PipelineContext
from release_validator.pipeline.executor import ConcurrentTaskExecutor
from release_validator.pipeline.schemas import ReviewRequestInput
from release_validator.planning.generator import GeminiTestPlanGenerator


@dataclass
class PipelineServices:
    github: GitHubClient
    generator: Any                  # TestPlanGenerator
    executor: ConcurrentTaskExecutor
    preview_bot_login: str
    preview_poll_interval: float
    preview_max_wait: float
    closeables: tuple[Any, ...] = ()

    @classmethod
    def from_settings(cls, config: Settings, credentials: Credentials) -> "PipelineServices":
        github = GitHubClient(
            credentials.github_token,
            base_url=config.GITHUB_API_BASE_URL,
            user_agent=config.GITHUB_USER_AGENT,
            timeout=config.HTTP_TIMEOUT_SECONDS,
        )
        issues = IssueTrackerClient(
            config.ISSUE_TRACKER_BASE_URL,
            timeout=config.HTTP_TIMEOUT_SECONDS,
        )
        tasks = BrowserTaskClient(
            credentials.browser_use_api_key,
            base_url=config.BROWSER_USE_BASE_URL,
            timeout=config.HTTP_TIMEOUT_SECONDS,
        )
        generator = GeminiTestPlanGenerator(
            github,
            issues,
            api_key=credentials.google_api_key,
            model=config.GEMINI_MODEL,
            temperature=config.LLM_TEMPERATURE,
            max_output_tokens=config.LLM_MAX_TOKENS,
            max_patch_chars=config.MAX_PATCH_CHARS,
        )
        executor = ConcurrentTaskExecutor(
            tasks,
            poll_interval=config.TASK_POLL_INTERVAL_SECONDS,
            max_wait=config.TASK_MAX_WAIT_SECONDS,
        )
        return cls(
            github=github,
            generator=generator,
            executor=executor,
            preview_bot_login=config.PREVIEW_BOT_LOGIN,
            preview_poll_interval=config.PREVIEW_POLL_INTERVAL_SECONDS,
            preview_max_wait=config.PREVIEW_MAX_WAIT_SECONDS,
            closeables=(github, issues, tasks),
        )

    def review_request(self, ctx: PipelineContext) -> ReviewRequestRef:
        """Resolve the review request the running pipeline was started for."""
        init = ReviewRequestInput.model_validate(dict(ctx.get_init_data()))
        return self.github.resolve(init.pull_request_url)

    async def aclose(self) -> None:
        for client in self.closeables:
            await client.aclose()
