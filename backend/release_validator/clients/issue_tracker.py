"""HTTP client for the scrum board issue tracker."""

from __future__ import annotations

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from release_validator.core.config import settings
from release_validator.core.logging import get_logger
from release_validator.pipeline.errors import IssueLookupError, UpstreamApiError

logger = get_logger(__name__)


class Issue(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    title: str
    description: str | None = None
    status: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class IssueTrackerClient:
    """Looks up scrum issues by ID."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.ISSUE_TRACKER_BASE_URL).rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, issue_id: str) -> Issue:
        """
        Fetch one issue.

        Non-2xx raises UpstreamApiError with the body text.  A transport
        failure or a body that is not an issue object raises
        IssueLookupError.
        """
        url = f"{self.base_url}/{issue_id}"
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise IssueLookupError(
                f"Issue tracker unreachable for {issue_id}: {exc}", issue_id=issue_id,
            ) from exc

        if not response.is_success:
            raise UpstreamApiError(
                "fetch scrum issue",
                response.status_code,
                url=url,
                response_body=response.text,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise IssueLookupError(f"Malformed issue response for {issue_id}", issue_id=issue_id) from exc
        if not isinstance(data, dict):
            raise IssueLookupError(f"Unexpected issue payload for {issue_id}", issue_id=issue_id)

        # the tracker returns numeric ids for some boards
        data["id"] = str(data.get("id", issue_id))
        try:
            issue = Issue.model_validate(data)
        except PydanticValidationError as exc:
            raise IssueLookupError(
                f"Issue {issue_id} is missing required fields: {exc.error_count()} error(s)",
                issue_id=issue_id,
            ) from exc

        logger.debug("Scrum issue fetched", issue_id=issue_id)
        return issue
