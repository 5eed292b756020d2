"""
Bounded polling: wait until a check yields a value, or give up.

``poll_until`` calls ``check`` every ``interval`` seconds.  The first
non-None value it returns ends the wait.  Once ``max_wait`` seconds
have elapsed without a value, PollTimeoutError is raised.  Sleeps are
clamped to the remaining budget, so the timeout fires at ``max_wait``
and never more than one interval late.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, TypeVar

from release_validator.core.logging import get_logger
from release_validator.pipeline.errors import PollTimeoutError

logger = get_logger(__name__)

T = TypeVar("T")


async def poll_until(
    check: Callable[[], Awaitable[T | None]],
    *,
    interval: float,
    max_wait: float,
    description: str = "condition",
    tolerate_errors: bool = True,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Repeatedly await ``check`` until it returns something other than None.

    Args:
        check: Async callable returning the discovered value, or None
            for "not yet".
        interval: Seconds to sleep between checks.
        max_wait: Total seconds to wait before raising PollTimeoutError.
        description: Label used in log lines and the timeout message.
        tolerate_errors: When True an exception from ``check`` is logged
            and counted as "not yet"; when False it propagates.
        clock: Monotonic time source, injectable for tests.
        sleep: Async sleep, injectable for tests.
    """
    if interval <= 0:
        raise ValueError("interval must be positive")

    log = logger.bind(description=description, interval=interval, max_wait=max_wait)
    started = clock()
    attempt = 0

    while True:
        attempt += 1
        try:
            value = await check()
        except Exception as exc:
            if not tolerate_errors:
                raise
            log.warning("Poll check failed, will retry", attempt=attempt, error=str(exc))
            value = None

        if value is not None:
            log.debug("Poll condition met", attempt=attempt, elapsed=clock() - started)
            return value

        elapsed = clock() - started
        remaining = max_wait - elapsed
        if remaining <= 0:
            log.warning("Poll timed out", attempts=attempt, elapsed=elapsed)
            raise PollTimeoutError(description, max_wait=max_wait, elapsed=elapsed)

        log.debug("Not ready yet, waiting", attempt=attempt, wait=min(interval, remaining))
        await sleep(min(interval, remaining))
