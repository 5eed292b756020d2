"""
LangSmith tracing utilities.

Provides a setup function and a @traceable-aware wrapper so that the
test plan generator is traced when LangSmith is configured and runs
untraced otherwise (e.g. local dev without an API key).

Usage:
    from release_validator.core.tracing import setup_tracing, traceable_step

    setup_tracing()   # call once at startup

    @traceable_step(name="generate_test_plan", run_type="chain")
    async def generate(review_request_url):
        ...
"""

from __future__ import annotations

import functools
import os
from typing import Any, Callable

from langsmith import traceable

from release_validator.core.config import Settings, settings
from release_validator.core.logging import get_logger

logger = get_logger(__name__)

_tracing_enabled = False


def setup_tracing(config: Settings | None = None) -> bool:
    """
    Turn generator tracing on when a LangSmith key is configured.

    The SDK reads its endpoint, project and key from the environment, so
    they are exported here once per process.  Returns whether traces
    will be sent.
    """
    global _tracing_enabled

    config = config or settings
    _tracing_enabled = bool(config.LANGSMITH_TRACING and config.LANGSMITH_API_KEY)
    if not _tracing_enabled:
        logger.info("Generator tracing off", langsmith_tracing=config.LANGSMITH_TRACING)
        return False

    os.environ.update({
        "LANGSMITH_API_KEY": config.LANGSMITH_API_KEY,
        "LANGSMITH_ENDPOINT": config.LANGSMITH_ENDPOINT,
        "LANGSMITH_PROJECT": config.LANGSMITH_PROJECT,
        "LANGSMITH_TRACING": "true",
    })
    logger.info("Generator tracing on", project=config.LANGSMITH_PROJECT)
    return True


def traceable_step(
    name: str,
    run_type: str = "chain",
    metadata: dict[str, Any] | None = None,
    tags: list[str] | None = None,
) -> Callable:
    """
    Wrap an async function with LangSmith @traceable when tracing is
    enabled at call time; call it directly otherwise.

    Args:
        name: Trace name shown in LangSmith UI.
        run_type: One of "chain", "llm", "tool", "retriever".
        metadata: Static metadata attached to every trace.
        tags: Tags for filtering in LangSmith.
    """
    def decorator(func: Callable) -> Callable:
        traced_fn = traceable(
            name=name,
            run_type=run_type,
            metadata=metadata or {},
            tags=tags or [],
        )(func)

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            if _tracing_enabled:
                return await traced_fn(*args, **kwargs)
            return await func(*args, **kwargs)
        return wrapper
    return decorator
