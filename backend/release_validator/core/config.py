"""
Pydantic Settings: centralized configuration loaded from environment variables.

Credentials default to empty strings so that importing this module never
fails.  Each process entry point calls validate_startup() once to turn
missing credentials into a StartupError before any pipeline work begins.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_settings import BaseSettings


class StartupError(RuntimeError):
    """Required configuration is missing at process startup."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing required settings: {', '.join(missing)}")


class Settings(BaseSettings):
    # ── Credentials ──────────────────────────
    GITHUB_TOKEN: str = ""
    BROWSER_USE_API_KEY: str = ""
    GOOGLE_API_KEY: str = ""

    # ── Review host / issue tracker ──────────
    GITHUB_API_BASE_URL: str = "https://api.github.com"
    GITHUB_USER_AGENT: str = "release-validator"
    ISSUE_TRACKER_BASE_URL: str = "https://scrum-board-navy.vercel.app/api/tickets"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # ── Preview environment wait ─────────────
    PREVIEW_BOT_LOGIN: str = "vercel[bot]"
    PREVIEW_POLL_INTERVAL_SECONDS: float = 5.0
    PREVIEW_MAX_WAIT_SECONDS: float = 120.0

    # ── Remote browser tasks ─────────────────
    BROWSER_USE_BASE_URL: str = "https://api.browser-use.com/api/v2"
    TASK_POLL_INTERVAL_SECONDS: float = 2.0
    TASK_MAX_WAIT_SECONDS: float = 300.0

    # ── Test plan generator (Gemini) ─────────
    GEMINI_MODEL: str = "gemini-2.5-flash"
    LLM_TEMPERATURE: float = 0.0
    LLM_MAX_TOKENS: int = 4096
    MAX_PATCH_CHARS: int = 4000

    # ── LangSmith Tracing ────────────────────
    LANGSMITH_API_KEY: str = ""
    LANGSMITH_ENDPOINT: str = "https://api.smith.langchain.com"
    LANGSMITH_PROJECT: str = "release-validator"
    LANGSMITH_TRACING: bool = False

    # ── Redis / Celery ───────────────────────
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"

    # ── Application ──────────────────────────
    APP_ENV: str = "development"

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}


@dataclass(frozen=True)
class Credentials:
    """The three secrets every pipeline run needs."""

    github_token: str
    browser_use_api_key: str
    google_api_key: str


REQUIRED_CREDENTIALS = ("GITHUB_TOKEN", "BROWSER_USE_API_KEY", "GOOGLE_API_KEY")


def validate_startup(config: Settings | None = None) -> Credentials:
    """
    Check that every required credential is present.

    Returns a Credentials value on success.  Raises StartupError naming
    every missing variable otherwise.
    """
    config = config or settings
    missing = [key for key in REQUIRED_CREDENTIALS if not getattr(config, key)]
    if missing:
        raise StartupError(missing)

    return Credentials(
        github_token=config.GITHUB_TOKEN,
        browser_use_api_key=config.BROWSER_USE_API_KEY,
        google_api_key=config.GOOGLE_API_KEY,
    )


settings = Settings()
