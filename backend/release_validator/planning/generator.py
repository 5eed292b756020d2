"""
Test plan generation.

The pipeline depends only on the TestPlanGenerator protocol:
``generate(review_request_url) -> TestPlan``.  GeminiTestPlanGenerator
is the production implementation.  It gathers the pull request, its
changed files, its discussion and any referenced scrum issues, asks
Gemini for a JSON test plan and validates it.
"""

from __future__ import annotations

import json
import re
from typing import Any, Protocol

from google import genai
import httpx
from pydantic import ValidationError as PydanticValidationError

from release_validator.clients.github import GitHubClient, ReviewRequestRef
from release_validator.clients.issue_tracker import Issue, IssueTrackerClient
from release_validator.core.config import settings
from release_validator.core.logging import get_logger
from release_validator.core.tracing import traceable_step
from release_validator.pipeline.errors import IssueLookupError, TestPlanGenerationError, UpstreamApiError
from release_validator.pipeline.schemas import TestPlan
from release_validator.planning.prompts import SYSTEM_PROMPT, TEST_PLAN_PROMPT

logger = get_logger(__name__)

ISSUE_ID_PATTERNS = (
    re.compile(r"\b([A-Z][A-Z0-9]+-\d+)\b"),
    re.compile(r"\b(?:issue|ticket)[\s:#]+([\w-]*\d[\w-]*)", re.IGNORECASE),
    re.compile(r"(?<![\w&])#(\d+)\b"),
)


class TestPlanGenerator(Protocol):
    async def generate(self, review_request_url: str) -> TestPlan: ...


def find_issue_ids(*texts: str | None) -> list[str]:
    """Issue IDs referenced in the given texts, first occurrence order."""
    found: list[str] = []
    for text in texts:
        if not text:
            continue
        for pattern in ISSUE_ID_PATTERNS:
            for issue_id in pattern.findall(text):
                if issue_id not in found:
                    found.append(issue_id)
    return found


def parse_test_plan(response_text: str) -> TestPlan:
    """Parse the model's JSON answer.  Raises TestPlanGenerationError."""
    text = (response_text or "").strip()
    if not text:
        raise TestPlanGenerationError("Failed to generate test plan: empty response")

    # Strip markdown code block if present
    if text.startswith("```"):
        lines = text.split("\n")
        text = "\n".join(lines[1:-1])

    try:
        return TestPlan.model_validate(json.loads(text))
    except (json.JSONDecodeError, PydanticValidationError) as exc:
        logger.error("Failed to parse test plan", error=str(exc), preview=text[:300])
        raise TestPlanGenerationError(f"Failed to generate test plan: {exc}") from exc


class GeminiTestPlanGenerator:
    """Builds test plans with Gemini from pull request context."""

    def __init__(
        self,
        github: GitHubClient,
        issues: IssueTrackerClient,
        *,
        api_key: str,
        model: str | None = None,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
        max_patch_chars: int | None = None,
        client: Any = None,
    ) -> None:
        self.github = github
        self.issues = issues
        self.model = model or settings.GEMINI_MODEL
        self.temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        self.max_output_tokens = max_output_tokens or settings.LLM_MAX_TOKENS
        self.max_patch_chars = max_patch_chars or settings.MAX_PATCH_CHARS
        self._client = client or genai.Client(api_key=api_key)

    async def generate(self, review_request_url: str) -> TestPlan:
        ref = self.github.resolve(review_request_url)
        prompt = await self.build_prompt(ref, review_request_url)

        logger.info("Calling Gemini for test plan", model=self.model, prompt_chars=len(prompt))
        response_text = await self._complete(prompt)
        logger.info("Gemini response received", response_length=len(response_text or ""))

        plan = parse_test_plan(response_text)
        logger.info(
            "Test plan generated",
            needs_testing=plan.needs_testing,
            test_cases=len(plan.test_cases),
        )
        return plan

    async def build_prompt(self, ref: ReviewRequestRef, review_request_url: str) -> str:
        pull = await self.github.get_pull_request(ref)
        files = await self.github.get_pull_request_files(ref)
        comments = await self.github.list_comments(ref)
        issues = await self._referenced_issues(pull.get("title"), pull.get("body"))

        return TEST_PLAN_PROMPT.format(
            pull_request_url=review_request_url,
            title=pull.get("title") or "",
            state=pull.get("state") or "",
            body=pull.get("body") or "(no description)",
            files=self._format_files(files),
            comments=self._format_comments(comments),
            issues=self._format_issues(issues),
        )

    async def _referenced_issues(self, *texts: str | None) -> list[Issue]:
        found = []
        for issue_id in find_issue_ids(*texts):
            try:
                found.append(await self.issues.get(issue_id))
            except (UpstreamApiError, IssueLookupError, httpx.HTTPError, PydanticValidationError) as exc:
                logger.warning("Referenced issue lookup failed", issue_id=issue_id, error=str(exc))
        return found

    async def _complete(self, prompt: str) -> str:
        return await self._traced_complete(
            self._client,
            model=self.model,
            prompt=prompt,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )

    @staticmethod
    @traceable_step(
        name="generate_test_plan",
        run_type="llm",
        tags=["test-plan", "llm", "gemini"],
    )
    async def _traced_complete(
        client: Any,
        *,
        model: str,
        prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        response = await client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=genai.types.GenerateContentConfig(
                system_instruction=SYSTEM_PROMPT,
                temperature=temperature,
                max_output_tokens=max_output_tokens,
                response_mime_type="application/json",
            ),
        )
        return response.text or ""

    # ─── Prompt sections ───────────────────────────────

    def _format_files(self, files: list[dict[str, Any]]) -> str:
        if not files:
            return "(no changed files)"
        parts = []
        for f in files:
            patch = f.get("patch") or ""
            if len(patch) > self.max_patch_chars:
                patch = patch[: self.max_patch_chars] + "\n... (truncated)"
            parts.append(
                f"### {f.get('filename')} ({f.get('status')}, "
                f"+{f.get('additions')}/-{f.get('deletions')})\n{patch}"
            )
        return "\n\n".join(parts)

    @staticmethod
    def _format_comments(comments: list[dict[str, Any]]) -> str:
        if not comments:
            return "(no comments)"
        return "\n".join(f"- {c.get('user')}: {c.get('body')}" for c in comments)

    @staticmethod
    def _format_issues(issues: list[Issue]) -> str:
        if not issues:
            return "(none referenced)"
        return "\n\n".join(
            f"### {issue.id}: {issue.title} [{issue.status}]\n{issue.description or ''}"
            for issue in issues
        )
