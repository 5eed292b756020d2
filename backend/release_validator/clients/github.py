"""
HTTP client for the GitHub REST API (the review host).

Low-level ``get``/``post`` return an ApiResponse and never raise on
HTTP status; ``handle_response`` turns a non-2xx response into an
UpstreamApiError naming the attempted operation.  The higher-level
helpers below call it for you.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import httpx

from release_validator.core.config import settings
from release_validator.core.logging import get_logger
from release_validator.pipeline.errors import InvalidReviewRequestUrl, UpstreamApiError

logger = get_logger(__name__)

_REVIEW_URL_RE = re.compile(r"github\.com/(.+?)/(.+?)/(pull|issues)/(\d+)")


@dataclass(frozen=True)
class ReviewRequestRef:
    """A pull request or issue, resolved to its REST API location."""

    owner: str
    repo: str
    kind: str                       # "pull" | "issues"
    number: int
    api_base: str

    @property
    def comments_url(self) -> str:
        # PR conversation comments live on the issues endpoint
        return f"{self.api_base}/issues/{self.number}/comments"

    @property
    def pull_url(self) -> str:
        return f"{self.api_base}/pulls/{self.number}"

    @property
    def files_url(self) -> str:
        return f"{self.api_base}/pulls/{self.number}/files"


def parse_review_request_url(
    url: str,
    api_base_url: str | None = None,
) -> ReviewRequestRef:
    """Resolve a github.com pull/issue URL.  Raises InvalidReviewRequestUrl."""
    match = _REVIEW_URL_RE.search(url or "")
    if not match:
        raise InvalidReviewRequestUrl(f"Invalid GitHub URL: {url!r}")

    owner, repo, kind, number = match.groups()
    base = (api_base_url or settings.GITHUB_API_BASE_URL).rstrip("/")
    return ReviewRequestRef(
        owner=owner,
        repo=repo,
        kind=kind,
        number=int(number),
        api_base=f"{base}/repos/{owner}/{repo}",
    )


@dataclass
class ApiResponse:
    """Status, success flag and decoded JSON body of one API call."""

    status: int
    ok: bool
    data: Any


def handle_response(response: ApiResponse, operation: str, url: str = "GitHub API") -> Any:
    """Return ``response.data`` or raise UpstreamApiError for non-2xx."""
    if not response.ok:
        raise UpstreamApiError(operation, response.status, url=url)
    return response.data


class GitHubClient:
    """Authenticated async calls to the GitHub REST API."""

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.token = token
        self.base_url = (base_url or settings.GITHUB_API_BASE_URL).rstrip("/")
        self._client = httpx.AsyncClient(
            headers={
                "Accept": "application/vnd.github+json",
                "User-Agent": user_agent or settings.GITHUB_USER_AGENT,
            },
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    # ─── Low level ─────────────────────────────────────

    async def get(self, url: str, token: str | None = None) -> ApiResponse:
        response = await self._client.get(url, headers=self._auth(token))
        return self._wrap(response)

    async def post(self, url: str, body: dict[str, Any], token: str | None = None) -> ApiResponse:
        response = await self._client.post(url, json=body, headers=self._auth(token))
        return self._wrap(response)

    # ─── Review request helpers ────────────────────────

    def resolve(self, review_request_url: str) -> ReviewRequestRef:
        return parse_review_request_url(review_request_url, self.base_url)

    async def get_pull_request(self, ref: ReviewRequestRef) -> dict[str, Any]:
        data = handle_response(await self.get(ref.pull_url), "fetch pull request")
        return {
            "number": data.get("number"),
            "title": data.get("title"),
            "body": data.get("body"),
            "state": data.get("state"),
            "merged": data.get("merged"),
        }

    async def get_pull_request_files(self, ref: ReviewRequestRef) -> list[dict[str, Any]]:
        data = handle_response(await self.get(ref.files_url), "fetch PR diff")
        return [
            {
                "filename": f.get("filename"),
                "status": f.get("status"),
                "additions": f.get("additions"),
                "deletions": f.get("deletions"),
                "changes": f.get("changes"),
                "patch": f.get("patch"),
            }
            for f in data
        ]

    async def list_comments(self, ref: ReviewRequestRef) -> list[dict[str, Any]]:
        data = handle_response(await self.get(ref.comments_url), "fetch PR comments")
        return [
            {
                "id": c.get("id"),
                "body": c.get("body"),
                "user": (c.get("user") or {}).get("login"),
                "created_at": c.get("created_at"),
            }
            for c in data
        ]

    async def post_comment(self, ref: ReviewRequestRef, body: str) -> dict[str, Any]:
        logger.info("Posting comment", url=ref.comments_url, heading=body.split("\n", 1)[0])
        return handle_response(await self.post(ref.comments_url, {"body": body}), "post comment")

    # ─── Internals ─────────────────────────────────────

    def _auth(self, token: str | None) -> dict[str, str]:
        token = token or self.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    @staticmethod
    def _wrap(response: httpx.Response) -> ApiResponse:
        try:
            data = response.json()
        except ValueError:
            data = response.text
        return ApiResponse(status=response.status_code, ok=response.is_success, data=data)
