"""Clients for the services the pipeline talks to."""

from release_validator.clients.browser_tasks import BrowserTaskClient, CreatedTask, RemoteTask
from release_validator.clients.github import (
    ApiResponse,
    GitHubClient,
    ReviewRequestRef,
    handle_response,
    parse_review_request_url,
)
from release_validator.clients.issue_tracker import Issue, IssueTrackerClient

__all__ = [
    "ApiResponse",
    "BrowserTaskClient",
    "CreatedTask",
    "GitHubClient",
    "Issue",
    "IssueTrackerClient",
    "RemoteTask",
    "ReviewRequestRef",
    "handle_response",
    "parse_review_request_url",
]
